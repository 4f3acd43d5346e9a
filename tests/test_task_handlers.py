import pytest

from task_api.cqrs import CancellationToken, OperationCancelled
from task_api.models import Priority
from task_api.tasks import (
    CreateTaskCommand,
    DeleteTaskCommand,
    GetTaskByIdQuery,
    GetTasksQuery,
    SeedSampleTasksCommand,
    TaskValidationError,
    UpdateTaskCommand,
    build_dispatcher,
)


@pytest.fixture
def dispatcher(repo, clock):
    return build_dispatcher(repo, clock)


def token() -> CancellationToken:
    return CancellationToken()


def create(dispatcher, title="Task", **kwargs):
    return dispatcher.execute(CreateTaskCommand(title=title, **kwargs), token())


def assert_completion_invariant(task):
    assert (task["completed_at"] is not None) == task["is_completed"]


class TestCreate:
    def test_new_task_defaults(self, dispatcher, clock):
        task = create(dispatcher, title="  Write docs  ", description="all of them")
        assert task["id"] > 0
        assert task["title"] == "Write docs"
        assert task["description"] == "all of them"
        assert task["is_completed"] is False
        assert task["completed_at"] is None
        assert task["created_at"] == clock.now
        assert task["priority"] is Priority.MEDIUM

    def test_ids_are_unique(self, dispatcher):
        ids = {create(dispatcher)["id"] for _ in range(5)}
        assert len(ids) == 5

    @pytest.mark.parametrize("title", ["", "   ", "x" * 201])
    def test_invalid_title(self, dispatcher, title):
        with pytest.raises(TaskValidationError) as excinfo:
            create(dispatcher, title=title)
        assert excinfo.value.field == "title"

    def test_description_too_long(self, dispatcher):
        with pytest.raises(TaskValidationError) as excinfo:
            create(dispatcher, description="d" * 1001)
        assert excinfo.value.errors()[0]["loc"] == ["body", "description"]

    def test_title_at_limit_is_accepted(self, dispatcher):
        assert len(create(dispatcher, title="t" * 200)["title"]) == 200


class TestUpdate:
    def test_unknown_id_returns_none(self, dispatcher):
        assert dispatcher.execute(UpdateTaskCommand(task_id=99, title="x"), token()) is None

    def test_absent_fields_unchanged(self, dispatcher):
        task = create(dispatcher, title="Keep", description="desc", priority=Priority.HIGH)
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"]), token())
        assert updated == task

    def test_blank_title_is_no_op(self, dispatcher):
        task = create(dispatcher, title="Keep")
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], title="  "), token())
        assert updated["title"] == "Keep"

    def test_empty_title_rejected_and_not_stored(self, dispatcher):
        task = create(dispatcher, title="Keep")
        with pytest.raises(TaskValidationError) as excinfo:
            dispatcher.execute(UpdateTaskCommand(task_id=task["id"], title=""), token())
        assert excinfo.value.field == "title"
        assert dispatcher.ask(GetTaskByIdQuery(task["id"]), token())["title"] == "Keep"

    def test_title_is_trimmed(self, dispatcher):
        task = create(dispatcher)
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], title=" New "), token())
        assert updated["title"] == "New"

    def test_title_too_long_rejected_and_not_stored(self, dispatcher):
        task = create(dispatcher, title="Keep")
        with pytest.raises(TaskValidationError):
            dispatcher.execute(UpdateTaskCommand(task_id=task["id"], title="y" * 201), token())
        assert dispatcher.ask(GetTaskByIdQuery(task["id"]), token())["title"] == "Keep"

    def test_empty_description_is_a_value(self, dispatcher):
        task = create(dispatcher, description="old")
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], description=""), token())
        assert updated["description"] == ""

    def test_complete_stamps_current_time(self, dispatcher, clock):
        task = create(dispatcher)
        done_at = clock.tick(60)
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=True), token())
        assert updated["is_completed"] is True
        assert updated["completed_at"] == done_at
        assert updated["created_at"] == task["created_at"]
        assert_completion_invariant(updated)

    def test_completing_again_keeps_first_stamp(self, dispatcher, clock):
        task = create(dispatcher)
        first = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=True), token())
        clock.tick(3600)
        again = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=True), token())
        assert again["completed_at"] == first["completed_at"]

    def test_reopen_clears_stamp(self, dispatcher):
        task = create(dispatcher)
        dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=True), token())
        reopened = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=False), token())
        assert reopened["is_completed"] is False
        assert reopened["completed_at"] is None
        assert_completion_invariant(reopened)

    def test_priority_change(self, dispatcher):
        task = create(dispatcher)
        updated = dispatcher.execute(UpdateTaskCommand(task_id=task["id"], priority=Priority.LOW), token())
        assert updated["priority"] is Priority.LOW

    def test_update_is_persisted(self, dispatcher):
        task = create(dispatcher)
        dispatcher.execute(UpdateTaskCommand(task_id=task["id"], title="Stored"), token())
        assert dispatcher.ask(GetTaskByIdQuery(task["id"]), token())["title"] == "Stored"


class TestDeleteAndGet:
    def test_get_missing_returns_none(self, dispatcher):
        assert dispatcher.ask(GetTaskByIdQuery(task_id=1), token()) is None

    def test_delete(self, dispatcher):
        task = create(dispatcher)
        assert dispatcher.execute(DeleteTaskCommand(task["id"]), token()) is True
        assert dispatcher.ask(GetTaskByIdQuery(task["id"]), token()) is None

    def test_delete_missing_returns_false(self, dispatcher):
        assert dispatcher.execute(DeleteTaskCommand(12345), token()) is False


class TestList:
    def seed(self, dispatcher, clock):
        specs = [
            ("low-open", Priority.LOW, False),
            ("high-done", Priority.HIGH, True),
            ("high-open", Priority.HIGH, False),
            ("med-done", Priority.MEDIUM, True),
        ]
        for title, priority, done in specs:
            clock.tick()
            task = create(dispatcher, title=title, priority=priority)
            if done:
                dispatcher.execute(UpdateTaskCommand(task_id=task["id"], is_completed=True), token())

    def titles(self, dispatcher, **filters):
        return [t["title"] for t in dispatcher.ask(GetTasksQuery(**filters), token())]

    def test_no_filter_newest_first(self, dispatcher, clock):
        self.seed(dispatcher, clock)
        assert self.titles(dispatcher) == ["med-done", "high-open", "high-done", "low-open"]

    def test_completion_filter(self, dispatcher, clock):
        self.seed(dispatcher, clock)
        assert self.titles(dispatcher, is_completed=True) == ["med-done", "high-done"]
        assert self.titles(dispatcher, is_completed=False) == ["high-open", "low-open"]

    def test_priority_filter(self, dispatcher, clock):
        self.seed(dispatcher, clock)
        assert self.titles(dispatcher, priority=Priority.HIGH) == ["high-open", "high-done"]

    def test_combined_filters_intersect(self, dispatcher, clock):
        self.seed(dispatcher, clock)
        assert self.titles(dispatcher, is_completed=True, priority=Priority.HIGH) == ["high-done"]
        assert self.titles(dispatcher, is_completed=True, priority=Priority.LOW) == []


class TestSeed:
    def test_seeds_empty_store_only(self, dispatcher, repo):
        dispatcher.send(SeedSampleTasksCommand(), token())
        dispatcher.send(SeedSampleTasksCommand(), token())
        tasks = dispatcher.ask(GetTasksQuery(), token())
        assert len(tasks) == 3
        for task in tasks:
            assert_completion_invariant(task)


class TestCancellation:
    def test_cancelled_token_stops_store_call(self, dispatcher, repo):
        cancelled = CancellationToken()
        cancelled.cancel()
        with pytest.raises(OperationCancelled):
            dispatcher.execute(CreateTaskCommand(title="never"), cancelled)
        assert repo.count() == 0

    def test_cancelled_query(self, dispatcher):
        cancelled = CancellationToken()
        cancelled.cancel()
        with pytest.raises(OperationCancelled):
            dispatcher.ask(GetTasksQuery(), cancelled)
