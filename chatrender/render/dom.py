"""DOM view over rendered HTML, for driving the copy controller."""

from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag


class ClassList:
    """view over an element's class attribute."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def _names(self) -> list[str]:
        value = self._tag.get("class") or []
        return value.split() if isinstance(value, str) else list(value)

    def contains(self, name: str) -> bool:
        """checks class membership."""
        return name in self._names()

    def add(self, name: str) -> None:
        """adds a class if missing."""
        names = self._names()
        if name not in names:
            self._tag["class"] = names + [name]

    def remove(self, name: str) -> None:
        """removes a class if present."""
        names = self._names()
        if name in names:
            self._tag["class"] = [n for n in names if n != name]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)


class Element:
    """element wrapper exposing the browser-style operations the controller uses."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag
        self.class_list = ClassList(tag)

    @property
    def name(self) -> str:
        """tag name."""
        return str(self.tag.name)

    @property
    def text_content(self) -> str:
        """concatenated text of all descendants, entities decoded."""
        return str(self.tag.get_text())

    @property
    def is_connected(self) -> bool:
        """True while the element is still attached to its document."""
        return any(isinstance(parent, BeautifulSoup) for parent in self.tag.parents)

    def get_attribute(self, name: str) -> Optional[str]:
        """returns an attribute value or None."""
        value = self.tag.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else " ".join(value)

    def remove(self) -> None:
        """detaches the element from the document."""
        self.tag.extract()

    def iter(self) -> Iterator["Element"]:
        """iterates descendant elements depth-first."""
        for node in self.tag.descendants:
            if isinstance(node, Tag):
                yield Element(node)

    def find(self, predicate: Callable[["Element"], bool]) -> Optional["Element"]:
        """returns the first descendant matching predicate."""
        for node in self.iter():
            if predicate(node):
                return node
        return None

    def find_by_class(self, name: str) -> Optional["Element"]:
        """returns the first descendant carrying a class."""
        return self.find(lambda node: node.class_list.contains(name))

    def find_by_attribute(self, name: str, value: str) -> Optional["Element"]:
        """returns the first descendant whose attribute equals value."""
        return self.find(lambda node: node.get_attribute(name) == value)

    def closest(self, predicate: Callable[["Element"], bool]) -> Optional["Element"]:
        """returns self or the nearest ancestor element matching predicate."""
        node: Optional[Tag] = self.tag
        while node is not None and not isinstance(node, BeautifulSoup):
            element = Element(node)
            if predicate(element):
                return element
            node = node.parent
        return None

    def closest_by_class(self, name: str) -> Optional["Element"]:
        """returns self or the nearest ancestor carrying a class."""
        return self.closest(lambda node: node.class_list.contains(name))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Element) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"<Element {self.name} {self.tag.attrs!r}>"


class HtmlDocument:
    """parsed HTML document with id lookup."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self.root = Element(soup)

    @classmethod
    def from_html(cls, html: str) -> "HtmlDocument":
        """parses an HTML string into a document."""
        return cls(BeautifulSoup(html, "html.parser"))

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        """returns the element with the given id, or None."""
        tag = self.soup.find(id=element_id)
        return Element(tag) if isinstance(tag, Tag) else None

    def to_html(self) -> str:
        """serializes the current state of the document."""
        return str(self.soup)
