from compressed_shell.execution.runner import CommandRunner, ExecutionResult

__all__ = ["CommandRunner", "ExecutionResult"]
