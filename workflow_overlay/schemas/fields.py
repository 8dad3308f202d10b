"""Form structure the CMS hands to the overlay's update hooks.

The host owns the FieldList; the overlay only appends to it or inserts
into it. Composite fields are addressed with dotted names, e.g.
``ActionMenus.WorkflowOptions`` or ``Root.Workflow``.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FormField(BaseModel):
    """Base form field."""
    name: str
    title: Optional[str] = None
    field_type: str = "field"
    value: Any = None
    extra_classes: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)


class HiddenField(FormField):
    field_type: str = "hidden"


class ReadonlyField(FormField):
    field_type: str = "readonly"


class DropdownField(FormField):
    field_type: str = "dropdown"
    source: Dict[str, str] = Field(default_factory=dict)
    empty_string: Optional[str] = None


class ListboxField(FormField):
    field_type: str = "listbox"
    source: Dict[str, str] = Field(default_factory=dict)


class WorkflowLogField(FormField):
    """Read-only listing of the workflow instances that targeted the content."""
    field_type: str = "workflow_log"
    records: List[Dict[str, Any]] = Field(default_factory=list)


class FormAction(FormField):
    field_type: str = "action"


class CompositeField(FormField):
    """A field holding other fields."""
    field_type: str = "composite"
    children: List[FormField] = Field(default_factory=list)

    def push(self, field: FormField) -> FormField:
        self.children.append(field)
        return field

    def insert_before(self, name: str, field: FormField) -> FormField:
        """Insert ``field`` before the direct child ``name``, or append."""
        for index, child in enumerate(self.children):
            if child.name == name:
                self.children.insert(index, field)
                return field
        return self.push(field)

    def field_by_name(self, name: str) -> Optional[FormField]:
        head, _, rest = name.partition(".")
        for child in self.children:
            if child.name == head:
                if not rest:
                    return child
                if isinstance(child, CompositeField):
                    return child.field_by_name(rest)
                return None
        return None

    def remove_by_name(self, name: str) -> None:
        """Remove every descendant field called ``name``."""
        self.children = [child for child in self.children if child.name != name]
        for child in self.children:
            if isinstance(child, CompositeField):
                child.remove_by_name(name)

    def find_or_make_tab(self, path: str) -> "CompositeField":
        """Return the tab at the dotted ``path``, creating missing tab sets and tabs."""
        parts = path.split(".")
        container: CompositeField = self
        for depth, part in enumerate(parts):
            existing = container.field_by_name(part)
            if isinstance(existing, CompositeField):
                container = existing
                continue
            is_leaf = depth == len(parts) - 1
            container = container.push(Tab(name=part) if is_leaf else TabSet(name=part))
        return container

    def names(self) -> List[str]:
        return [child.name for child in self.children]


class Tab(CompositeField):
    field_type: str = "tab"


class TabSet(CompositeField):
    field_type: str = "tabset"


class FieldList(CompositeField):
    """Top-level list of fields or actions owned by the host form."""
    name: str = "FieldList"
    field_type: str = "fieldlist"
