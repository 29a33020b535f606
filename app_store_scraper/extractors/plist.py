"""Convert XML documents (plist search hints) into nested dicts."""

from typing import Any, Union

from bs4 import BeautifulSoup, Tag


def _element_to_value(element: Tag) -> Union[str, dict[str, Any]]:
    children = [child for child in element.children if isinstance(child, Tag)]
    if not children:
        return element.get_text(strip=True)

    value: dict[str, Any] = {}
    for child in children:
        converted = _element_to_value(child)
        if child.name not in value:
            value[child.name] = converted
        elif isinstance(value[child.name], list):
            value[child.name].append(converted)
        else:
            value[child.name] = [value[child.name], converted]
    return value


def xml_to_dict(body: str) -> dict[str, Any]:
    """
    Parse an XML document into nested dicts keyed by tag name.

    Leaf elements become their text, repeated sibling tags become lists and a
    tag that appears once stays a bare value. Attributes are dropped.

    Example:
        ``<plist><dict><key>a</key><string>b</string></dict></plist>``
        becomes ``{"plist": {"dict": {"key": "a", "string": "b"}}}``
    """
    soup = BeautifulSoup(body, "xml")
    root = soup.find(True)
    if root is None:
        return {}
    return {root.name: _element_to_value(root)}
