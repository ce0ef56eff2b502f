from pipestudio.utils.dag import build_order_tree, build_rich_tree, iter_nodes

from conftest import build


def test_iter_nodes_preorder_with_repeats():
    # a -> b, a -> c, b -> d, c -> d
    g = build(
        [("a", "data-source"), ("b", "data-preprocessing"), ("c", "feature-engineering"), ("d", "sklearn-models")],
        [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")],
    )
    walked = [(depth, node.id, via.id if via else None, repeated) for depth, node, via, repeated in iter_nodes(g)]
    assert walked == [
        (0, "a", None, False),
        (1, "b", "ea-b", False),
        (2, "d", "eb-d", False),
        (1, "c", "ea-c", False),
        (2, "d", "ec-d", True),
    ]


def test_pure_cycle_still_listed():
    g = build([("a", "x"), ("b", "y")], [("a", "b"), ("b", "a")])
    walked = [(node.id, repeated) for _, node, _, repeated in iter_nodes(g)]
    assert walked == [("a", False), ("b", False), ("a", True)]


def test_deep_chain_tree():
    n = 3000
    g = build([(f"n{i}", "data-preprocessing") for i in range(n)], [(f"n{i}", f"n{i + 1}") for i in range(n - 1)])
    depths = [depth for depth, *_ in iter_nodes(g)]
    assert depths == list(range(n))
    assert build_rich_tree(g).label == "[bold]Pipeline DAG[/]"


def test_order_tree_numbering(chain):
    tree = build_order_tree(list(chain.nodes))
    assert len(tree.children) == 4
    assert str(tree.children[0].label).startswith("1. ")
