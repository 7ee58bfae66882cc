"""Registry configuration for rendered chat transcripts."""

from anchoring.linearizer.registry import TagRegistry

# Subtrees that never carry visible transcript text
SKIP_TAGS = {
    "head",
    "script",
    "style",
    "noscript",
    "template",
    "svg",
    "canvas",
    "iframe",
    "object",
    "button",
    "select",
    "textarea",
}

# Elements that start a new line of text when rendered
BLOCK_TAGS = {
    "html",
    "body",
    "main",
    "article",
    "section",
    "aside",
    "header",
    "footer",
    "nav",
    "div",
    "p",
    "pre",
    "blockquote",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "ul",
    "ol",
    "li",
    "dl",
    "dt",
    "dd",
    "table",
    "thead",
    "tbody",
    "tfoot",
    "tr",
    "td",
    "th",
    "caption",
    "figure",
    "figcaption",
    "details",
    "summary",
    "hr",
    "br",
}


def create_html_registry() -> TagRegistry:
    """Create registry configured for HTML chat transcripts.

    Returns:
        TagRegistry with block and skip tags registered
    """
    registry = TagRegistry()
    registry.skip(*SKIP_TAGS)
    registry.block(*BLOCK_TAGS)
    return registry
