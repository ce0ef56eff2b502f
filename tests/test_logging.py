import pipestudio.utils.logging as log
from pipestudio.utils.events import NodeFinished, RunCompleted, RunStarted, publish


def test_logger_levels():
    logger = log.get("debug")
    assert logger.level == 10  # DEBUG
    logger = log.get("error")
    assert logger.level == 40  # ERROR
    log.get("info")


def test_progress_follows_run_events():
    log.stop()
    log.attach()

    publish(RunStarted(run_id="r1", pipeline="churn", total=4))
    publish(NodeFinished(run_id="r1", node_id="a", index=0, status="success"))
    publish(NodeFinished(run_id="r1", node_id="b", index=1, status="error"))

    prog = log._ensure_progress()
    task = prog.tasks[log._tasks["r1"]]
    assert task.total == 4
    assert task.completed == 2

    publish(RunCompleted(run_id="r1", pipeline="churn", total=4, failed=1))
    assert task.completed == 4

    log.stop()
    assert log._progress is None
    assert log._tasks == {}


def test_attach_is_idempotent():
    log.stop()
    log.attach()
    log.attach()

    publish(RunStarted(run_id="r2", pipeline="p", total=2))
    publish(NodeFinished(run_id="r2", node_id="a", index=0, status="success"))
    task = log._progress.tasks[log._tasks["r2"]]
    assert task.completed == 1

    log.stop()
