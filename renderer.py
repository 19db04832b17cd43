from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from parser import Node
from attributes import get_attribute_with_default

if TYPE_CHECKING:
    from rasterizer import Rasterizer

class Renderer(ABC):
    """Draws one kind of element onto the canvas of a rasterization context.

    ``attributes`` names the node attributes collected into the options dict
    handed to :meth:`render`.
    """

    attributes: tuple = ()

    def get_options(self, node: Node) -> dict:
        return {name: get_attribute_with_default(node, name) for name in self.attributes}

    @abstractmethod
    def render(self, context: 'Rasterizer', options: dict, node: Node):
        ...
