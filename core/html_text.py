"""
HTML to table text normalization.

HTML emails carry the same results table as the plaintext part, but as
<tr>/<td> markup. This converts the markup to the tab/newline convention
that core.table scans, so both encodings share one table scanner.

This is tag stripping for one known email layout, not a general HTML parser.
"""

import re

STYLE_BLOCK = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
SCRIPT_BLOCK = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)

HEADER_CELL_BOUNDARY = re.compile(r"</th>\s*<th[^>]*>", re.IGNORECASE)
DATA_CELL_BOUNDARY = re.compile(r"</td>\s*<td[^>]*>", re.IGNORECASE)
ROW_CLOSE = re.compile(r"</tr>", re.IGNORECASE)
ROW_OPEN = re.compile(r"<tr[^>]*>", re.IGNORECASE)
ANY_TAG = re.compile(r"<[^>]+>")

NUMERIC_ENTITY = re.compile(r"&#(\d+);")

# Replaced in this order ("&amp;lt;" ends up as "<")
NAMED_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)

# A tab anywhere in the run, or 2+ spaces, is a cell delimiter.
# Single spaces are word spacing inside a cell ("Kevin Ruiz", "1244 (+44)").
DELIMITER_RUN = re.compile(r"[ \t]*\t[ \t]*| {2,}")
BLANK_LINES = re.compile(r"\n\s*\n")


def _decode_numeric_entity(match: re.Match) -> str:
    code = int(match.group(1))
    # Lone surrogates and out-of-range codes stay as written
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return match.group(0)
    return chr(code)



def decode_entities(text: str) -> str:
    """
    Decode the fixed set of entities found in vendor emails.

    Examples:
        >>> decode_entities("Lam&nbsp;Le &amp; Co")
        'Lam Le & Co'
        >>> decode_entities("&#65;&#66;")
        'AB'
    """
    for entity, char in NAMED_ENTITIES:
        text = text.replace(entity, char)
    return NUMERIC_ENTITY.sub(_decode_numeric_entity, text)


def extract_text_from_html(html: str) -> str:
    """
    Extract tab-separated table text from HTML email content.

    Args:
        html: HTML body of the email

    Returns:
        Text with one table row per line and cells separated by tabs
    """
    if not html:
        return ""

    # Remove style and script blocks with their content
    text = STYLE_BLOCK.sub("", html)
    text = SCRIPT_BLOCK.sub("", text)

    # Cells -> tabs
    text = HEADER_CELL_BOUNDARY.sub("\t", text)
    text = DATA_CELL_BOUNDARY.sub("\t", text)

    # Rows -> newlines
    text = ROW_CLOSE.sub("\n", text)
    text = ROW_OPEN.sub("", text)

    text = ANY_TAG.sub("", text)
    text = decode_entities(text)

    # Clean up whitespace
    text = DELIMITER_RUN.sub("\t", text)
    text = BLANK_LINES.sub("\n", text)

    return text.strip()
