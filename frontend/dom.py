"""
Minimal page model the web client controller runs against.

Only the pieces the controller touches are modelled: elements addressed by
id, CSS class lists, form values, event listeners, a task queue for
asynchronous callbacks (file reads), and window alerts.
"""

import base64
import mimetypes
from typing import Any, Callable, Dict, Iterator, List, Optional

Listener = Callable[["Event"], None]


class Event:
    def __init__(self, event_type: str, target: Any = None) -> None:
        self.type = event_type
        self.target = target
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class ClassList:
    """Ordered set of CSS class names."""

    def __init__(self, names=()) -> None:
        self._names: List[str] = []
        for name in names:
            self.add(name)

    def add(self, name: str) -> None:
        if name not in self._names:
            self._names.append(name)

    def remove(self, name: str) -> None:
        if name in self._names:
            self._names.remove(name)

    def toggle(self, name: str) -> bool:
        """Flip a class; returns True if it is now present."""
        if name in self._names:
            self._names.remove(name)
            return False
        self._names.append(name)
        return True

    def contains(self, name: str) -> bool:
        return name in self._names

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))


class EventTarget:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def dispatch_event(self, event: Event) -> Event:
        if event.target is None:
            event.target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return event


class File:
    """A file picked in an <input type="file">."""

    def __init__(self, name: str, content: bytes, content_type: Optional[str] = None) -> None:
        self.name = name
        self.content = content
        self.type = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"


class Element(EventTarget):
    def __init__(
        self,
        element_id: Optional[str] = None,
        tag: str = "div",
        classes=(),
        name: Optional[str] = None,
        value: str = "",
        text_content: str = "",
        input_type: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.id = element_id
        self.tag = tag
        self.class_list = ClassList(classes)
        self.name = name
        self.value = value
        self.text_content = text_content
        self.input_type = input_type
        self.src = ""
        self.files: List[File] = []
        self.children: List["Element"] = []
        self.parent: Optional["Element"] = None

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    def iter_descendants(self) -> Iterator["Element"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_selector(self, selector: str) -> Optional["Element"]:
        """
        First descendant matching `.class`, `#id` or a tag name.
        """
        for element in self.iter_descendants():
            if element.matches(selector):
                return element
        return None

    def matches(self, selector: str) -> bool:
        if selector.startswith("."):
            return selector[1:] in self.class_list
        if selector.startswith("#"):
            return self.id == selector[1:]
        return self.tag == selector

    def click(self) -> Event:
        return self.dispatch_event(Event("click", self))

    def submit(self) -> Event:
        return self.dispatch_event(Event("submit", self))

    def type_text(self, value: str) -> Event:
        """Replace the value and fire an input event, as typing would."""
        self.value = value
        return self.dispatch_event(Event("input", self))

    def choose_files(self, *files: File) -> Event:
        self.files = list(files)
        return self.dispatch_event(Event("change", self))


class Document(EventTarget):
    """
    Page root. Callbacks queued with `queue_task` run on `run_pending`,
    the way browser tasks run after the current handler returns.
    """

    def __init__(self) -> None:
        super().__init__()
        self.body = Element(tag="body")
        self.alerts: List[str] = []
        self._tasks: List[Callable[[], None]] = []

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for element in self.body.iter_descendants():
            if element.id == element_id:
                return element
        return None

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def queue_task(self, task: Callable[[], None]) -> None:
        self._tasks.append(task)

    def run_pending(self) -> int:
        """Run queued tasks (including ones they queue); returns how many ran."""
        ran = 0
        while self._tasks:
            self._tasks.pop(0)()
            ran += 1
        return ran

    def content_loaded(self) -> Event:
        return self.dispatch_event(Event("DOMContentLoaded", self))


def form_data(form: Element) -> Dict[str, Any]:
    """
    Named fields inside a form, keyed by name. File inputs contribute
    their first file (or None).
    """
    data: Dict[str, Any] = {}
    for element in form.iter_descendants():
        if not element.name:
            continue
        if element.input_type == "file":
            data[element.name] = element.files[0] if element.files else None
        else:
            data[element.name] = element.value
    return data


class FileReader:
    """
    Reads a File into a data URL. The result is delivered through
    `onload` on a later task, never synchronously.
    """

    def __init__(self, document: Document) -> None:
        self.document = document
        self.result: Optional[str] = None
        self.onload: Optional[Listener] = None

    def read_as_data_url(self, file: File) -> None:
        def finish() -> None:
            encoded = base64.b64encode(file.content).decode("ascii")
            self.result = f"data:{file.type};base64,{encoded}"
            if self.onload:
                self.onload(Event("load", self))

        self.document.queue_task(finish)
