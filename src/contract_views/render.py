"""Rich rendering of the contract tree for the CLI."""

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from .grouping import CONTEXT_CODE
from .tree import ContractTree
from .types import Contract, Node


def node_text(node: Node, *, selected: bool = False) -> Text:
    """Render one node as a single styled line."""
    text = Text()
    if node.context_value == CONTEXT_CODE:
        text.append(node.label, style="bold cyan")
        return text

    text.append("● " if selected else "  ", style="green")
    text.append(node.label, style="bold" if selected else "")
    if node.description:
        text.append(f"  {node.description}", style="dim")
    if node.disconnected:
        text.append("  (disconnected)", style="yellow")
    return text


def build_rich_tree(tree: ContractTree, title: str | None = None) -> Tree:
    """Build a rich Tree from the contract tree's current roots."""
    workspace = tree.workspace
    if title is None:
        title = f"Contracts on {workspace.active_chain} [dim]({workspace.sort_order})[/dim]"
    root = Tree(title, guide_style="dim")

    def _add(parent: Tree, elements: list[Contract]) -> None:
        for element in elements:
            node = tree.get_node(element)
            selected = node.identity == workspace.selected_contract and not element.is_group
            branch = parent.add(node_text(node, selected=selected), expanded=node.expanded)
            if node.expandable:
                _add(branch, tree.get_children(element))

    _add(root, tree.get_roots())
    return root
