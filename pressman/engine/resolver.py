"""
Compatibility resolver.

Cascade (each level gated by its parent only):

    book size -> paper type -> paper weight -> print mode
    book size -> binding type -> cover weight
    binding type -> add-on eligibility

``resolve()`` raises ``IncompatibleSelection`` for the first supplied value
that its parent excludes. ``find_incompatibilities()`` walks the same cascade
and collects every such value; the validation gate uses it so both sides
share one definition of "legal".
"""

from types import MappingProxyType

from pressman.engine.types import (
    AddOn,
    AllowedOptions,
    BindingType,
    PaperType,
    PaperWeight,
    ProductCatalog,
    Selection,
)
from pressman.exceptions import IncompatibleSelection


def allowed_add_ons(catalog: ProductCatalog, binding_type: str | None) -> tuple[AddOn, ...]:
    """Add-ons eligible for the binding. Without a binding only unrestricted ones."""
    return tuple(a for a in catalog.add_ons if a.is_eligible(binding_type))


def _walk(catalog: ProductCatalog, selection: Selection):
    """
    Check every supplied value against its parent, in cascade order.

    Returns (errors, paper, weight, binding) where the last three are the
    catalog entries that were accepted, for narrowing the next level.
    """
    errors: list[IncompatibleSelection] = []

    if selection.book_size and selection.book_size != catalog.book_size:
        errors.append(IncompatibleSelection(
            "book_size",
            selection.book_size,
            "product_id",
            catalog.product_id,
            suggestions=[catalog.book_size],
        ))

    # Paper branch
    paper: PaperType | None = None
    if selection.paper_type is not None:
        paper = catalog.get_paper_type(selection.paper_type)
        if paper is None:
            errors.append(IncompatibleSelection(
                "paper_type",
                selection.paper_type,
                "book_size",
                catalog.book_size,
                suggestions=list(catalog.paper_type_names),
            ))

    weight: PaperWeight | None = None
    if selection.paper_weight is not None:
        weight = paper.get_weight(selection.paper_weight) if paper else None
        if weight is None:
            errors.append(IncompatibleSelection(
                "paper_weight",
                selection.paper_weight,
                "paper_type",
                selection.paper_type,
                suggestions=list(paper.weight_values) if paper else [],
            ))

    if selection.print_mode is not None:
        modes = weight.print_modes() if weight else ()
        if selection.print_mode not in modes:
            errors.append(IncompatibleSelection(
                "print_mode",
                selection.print_mode,
                "paper_weight",
                selection.paper_weight,
                suggestions=[str(m) for m in modes],
            ))

    # Binding branch
    binding: BindingType | None = None
    if selection.binding_type is not None:
        binding = catalog.get_binding_type(selection.binding_type)
        if binding is None:
            errors.append(IncompatibleSelection(
                "binding_type",
                selection.binding_type,
                "book_size",
                catalog.book_size,
                suggestions=list(catalog.binding_type_names),
            ))

    if selection.cover_weight is not None:
        cover_weights = binding.cover_weights if binding else ()
        if selection.cover_weight not in cover_weights:
            errors.append(IncompatibleSelection(
                "cover_weight",
                selection.cover_weight,
                "binding_type",
                selection.binding_type,
                suggestions=list(cover_weights),
            ))

    return errors, paper, weight, binding


def find_incompatibilities(catalog: ProductCatalog, selection: Selection) -> list[IncompatibleSelection]:
    """Every supplied value its ancestors exclude, in cascade order."""
    errors, _, _, _ = _walk(catalog, selection)
    return errors


def _build_maps(catalog: ProductCatalog) -> dict:
    return {
        "weights_by_paper_type": MappingProxyType(
            {p.name: p.weight_values for p in catalog.paper_types}
        ),
        "print_modes_by_weight": MappingProxyType(
            {
                p.name: MappingProxyType({w.weight: w.print_modes() for w in p.weights})
                for p in catalog.paper_types
            }
        ),
        "cover_weights_by_binding": MappingProxyType(
            {b.name: b.cover_weights for b in catalog.binding_types}
        ),
        "add_ons_by_binding": MappingProxyType(
            {b.name: allowed_add_ons(catalog, b.name) for b in catalog.binding_types}
        ),
    }


def resolve(catalog: ProductCatalog, selection: Selection) -> AllowedOptions:
    """
    Return what is still selectable without contradicting chosen ancestors.

    Add-ons ineligible for the selected binding are listed in
    ``disabled_add_ons`` and left out of ``add_ons``; the caller deselects
    them. The selection itself is never changed.

    Raises:
        IncompatibleSelection: a supplied value is excluded by its parent
    """
    errors, paper, weight, binding = _walk(catalog, selection)
    if errors:
        raise errors[0]

    add_ons = allowed_add_ons(catalog, binding.name if binding else None)
    allowed_names = {a.name for a in add_ons}

    return AllowedOptions(
        paper_types=catalog.paper_type_names,
        paper_weights=paper.weight_values if paper else (),
        print_modes=weight.print_modes() if weight else (),
        binding_types=catalog.binding_type_names,
        cover_weights=binding.cover_weights if binding else (),
        add_ons=add_ons,
        disabled_add_ons=tuple(n for n in catalog.add_on_names if n not in allowed_names),
        **_build_maps(catalog),
    )
