import re

from pipestudio.utils.ids import new_node_id, new_run_id, snake_case


def test_snake_case():
    assert snake_case("Run A (tuned)") == "run_a_tuned"
    assert snake_case("__Churn--Model__") == "churn_model"


def test_generated_ids():
    assert re.fullmatch(r"\d{8}T\d{6}-[0-9a-f]{8}", new_run_id())
    assert re.fullmatch(r"sklearn-models-[0-9a-f]{8}", new_node_id("sklearn-models"))
    assert new_node_id("x") != new_node_id("x")
