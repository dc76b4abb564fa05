class TaskboardError(Exception):
    """Base class for errors raised by the task service."""


class TaskNotFoundError(TaskboardError, LookupError):
    """A mutation targeted an id that is not in the store."""

    code = "NOT_FOUND"

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")
