"""The axiom pair from which all lattice dynamics derive.

Coherence is determinism. Incoherence is nondeterminism. The protocols
here describe constraints, elements and the structures that hold or
dissolve them; everything else in the package is grown from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Element(Protocol):
    """The minimal unit that can be lattice-bound or dissolved."""

    def type(self) -> str:
        """Return the type tag; an element bonds only in its own type layer."""

    def value(self) -> Any:
        """Return the content, opaque to the lattice."""


@runtime_checkable
class Constraint(Protocol):
    """The negative space that defines what fits at a lattice site."""

    def tag(self) -> str:
        """Return the type layer this constraint belongs to."""

    def admits(self, element: Element) -> bool:
        """Report whether an element satisfies this constraint."""


@runtime_checkable
class Coherent(Protocol):
    """A structure with constraints that can be checked against them."""

    def constraints(self) -> Sequence[Constraint]:
        """Return the constraint envelope at this position."""

    def satisfies(self, constraint: Constraint) -> bool:
        """Report whether this structure satisfies a constraint."""


@runtime_checkable
class Incoherent(Protocol):
    """A structure that can dissolve into free elements."""

    def dissolve(self) -> Sequence[Element]:
        """Break this structure into its constituent elements."""

    def available(self) -> bool:
        """Report whether elements are available to bond."""


@dataclass(frozen=True)
class Layer:
    """A type layer in the coherence field; depth 0 is the coarsest."""

    name: str
    depth: int = 0


@runtime_checkable
class StickyElement(Element, Protocol):
    """An element that can resist dissolution."""

    def is_sticky(self) -> bool:
        """Report whether this element survives dissolution."""


@runtime_checkable
class LayeredElement(Element, Protocol):
    """An element that belongs to a type layer."""

    def layer(self) -> Layer:
        """Return the element's layer."""


@runtime_checkable
class LayeredConstraint(Constraint, Protocol):
    """A constraint that operates in a layer and checks alignment."""

    def layer(self) -> Layer:
        """Return the layer this constraint operates in."""

    def aligns(self, element: LayeredElement) -> bool:
        """Report whether an element's layer is compatible with this one."""


@runtime_checkable
class PermutedElement(Element, Protocol):
    """An element carrying an S_3 permutation index (0-5)."""

    def permutation(self) -> int:
        """Return the permutation index."""


@runtime_checkable
class ProjectedElement(Element, Protocol):
    """An element carrying a cubic projection identity and path index."""

    def projection_vertex(self) -> int:
        """Return the cube vertex (0-7)."""

    def projection_key(self) -> int:
        """Return the projection direction (0-7)."""

    def projection_path(self) -> int:
        """Return the rendering-sequence path index."""


@runtime_checkable
class HexagramElement(Element, Protocol):
    """An element whose value is also carried as 6-bit hexagram tokens."""

    def hex_tokens(self) -> Sequence[int]:
        """Return the hexagram tokens, each in 0-63."""

    def orig_len(self) -> int:
        """Return the byte length of the value before encoding."""


@runtime_checkable
class ContextualConstraint(Constraint, Protocol):
    """A constraint that also checks the occupied neighbourhood."""

    def admits_in_context(
        self, element: Element, neighbors: Sequence[Element | None]
    ) -> bool:
        """Report whether the element can bond given its neighbours."""