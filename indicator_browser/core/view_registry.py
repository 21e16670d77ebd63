from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Type

from .dataset import Dataset
from .base_view import BaseView


class ViewRegistry:
    """
    Chart views the browser offers, keyed by view id.

    Holds classes, not instances: a view is bound to a Dataset only when a
    FilterState asks for it. Registration order is the order of the view
    dropdown.
    """

    def __init__(self):
        self._views: Dict[str, Type[BaseView]] = {}

    def register(self, view_cls: Type[BaseView]) -> None:
        """
        :raises TypeError: if view_cls is not a BaseView subclass or has no id
        :raises ValueError: if the id is taken
        """
        if not isinstance(view_cls, type) or not issubclass(view_cls, BaseView):
            raise TypeError(f"{view_cls!r} is not a BaseView subclass")
        if not view_cls.id:
            raise TypeError(f"{view_cls.__name__} does not define an 'id'")
        if view_cls.id in self._views:
            raise ValueError(f"View '{view_cls.id}' already registered")

        self._views[view_cls.id] = view_cls

    def create(self, view_id: str, dataset: Dataset) -> BaseView:
        view_cls = self._views.get(view_id)
        if view_cls is None:
            raise KeyError(f"View '{view_id}' not found; registered: {list(self._views)}")
        return view_cls(dataset)

    def has(self, view_id: str) -> bool:
        return view_id in self._views

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._views)

    def all_classes(self) -> List[Type[BaseView]]:
        return list(self._views.values())

    def default_view_id(self, preferred: Optional[str] = None) -> Optional[str]:
        """The preferred id if it is registered, else the first registered view."""
        if preferred is not None and preferred in self._views:
            return preferred
        return next(iter(self._views), None)
