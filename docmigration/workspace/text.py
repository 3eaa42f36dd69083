from typing import Any


def flatten_document(document: dict[str, Any]) -> str:
    """Concatenate the text runs of a Docs API document in reading order.

    Paragraphs and table cells (including nested tables) are visited in
    document order; no separators are added beyond the text runs' own newlines.
    """
    body = document.get("body") or {}
    return "".join(_content_text(body.get("content") or []))


def _content_text(elements: list[dict[str, Any]]) -> list[str]:
    parts: list[str] = []
    for element in elements:
        if "paragraph" in element:
            parts.extend(_paragraph_text(element["paragraph"]))
        elif "table" in element:
            for row in element["table"].get("tableRows") or []:
                for cell in row.get("tableCells") or []:
                    parts.extend(_content_text(cell.get("content") or []))
    return parts


def _paragraph_text(paragraph: dict[str, Any]) -> list[str]:
    parts: list[str] = []
    for element in paragraph.get("elements") or []:
        content = (element.get("textRun") or {}).get("content")
        if content:
            parts.append(content)
    return parts
