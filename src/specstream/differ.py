"""Patch Differ - additive change records between successive snapshots."""

from typing import Iterable

from .models import (
    AppendChild,
    Element,
    FinalizeElement,
    InsertElement,
    Patch,
    SetRoot,
    Spec,
    UpdateProps,
)


def diff(previous: Spec, current: Spec, keys: Iterable[str] | None = None) -> list[Patch]:
    """
    Compute the patches that turn ``previous`` into ``current``.

    Elements are compared by key. Unchanged elements are the same object in
    both snapshots, so passing the changed ``keys`` keeps the cost
    proportional to the delta; without it every key of ``current`` is checked.

    Order: inserts, prop updates, child appends, root, finalizes. Replaying
    them in order with ``apply_patches`` reproduces ``current``.

    Args:
        previous: Snapshot from the prior push
        current: Snapshot after this push
        keys: Keys that may have changed (all keys when None)

    Returns:
        Ordered patch list (empty if nothing changed)
    """
    if previous is current:
        return []
    if keys is None:
        keys = current.elements.keys()

    inserts: list[Patch] = []
    updates: list[Patch] = []
    appends: list[Patch] = []
    finals: list[Patch] = []

    for key in keys:
        new = current.elements.get(key)
        if new is None:
            continue
        old = previous.elements.get(key)
        if old is new:
            continue

        if old is None:
            inserts.append(
                InsertElement(key=key, type=new.type, props=dict(new.props), children=new.children)
            )
            if new.final:
                finals.append(FinalizeElement(key=key))
            continue

        changed = {
            name: value
            for name, value in new.props.items()
            if name not in old.props or old.props[name] != value
        }
        if changed:
            updates.append(UpdateProps(key=key, props=changed))
        for child in new.children[len(old.children) :]:
            appends.append(AppendChild(key=key, child=child))
        if new.final and not old.final:
            finals.append(FinalizeElement(key=key))

    patches = inserts + updates + appends
    if current.root != previous.root:
        patches.append(SetRoot(root=current.root))
    patches.extend(finals)
    return patches


def apply_patches(spec: Spec, patches: Iterable[Patch]) -> Spec:
    """
    Replay patches onto a snapshot.

    Raises:
        ValueError: If a patch addresses an element it cannot apply to
    """
    elements = dict(spec.elements)
    root = spec.root

    for patch in patches:
        match patch:
            case InsertElement(key=key):
                if key in elements:
                    raise ValueError(f"Element {key!r} already exists")
                elements[key] = Element(
                    key=key, type=patch.type, props=dict(patch.props), children=patch.children
                )
            case UpdateProps(key=key):
                element = _existing(elements, key)
                elements[key] = element.model_copy(
                    update={"props": {**element.props, **patch.props}}
                )
            case AppendChild(key=key, child=child):
                element = _existing(elements, key)
                if child not in elements:
                    raise ValueError(f"Child {child!r} of {key!r} does not exist")
                elements[key] = element.model_copy(
                    update={"children": element.children + (child,)}
                )
            case SetRoot(root=new_root):
                if new_root not in elements:
                    raise ValueError(f"Root {new_root!r} does not exist")
                root = new_root
            case FinalizeElement(key=key):
                element = _existing(elements, key)
                elements[key] = element.model_copy(update={"final": True})

    return Spec(root=root, elements=elements)


def _existing(elements: dict[str, Element], key: str) -> Element:
    try:
        element = elements[key]
    except KeyError:
        raise ValueError(f"Element {key!r} does not exist") from None
    if element.final:
        raise ValueError(f"Element {key!r} is final")
    return element
