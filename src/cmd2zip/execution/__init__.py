"""
Command building, per-command job execution and the worker pool scheduler.
"""

from cmd2zip.execution.command_builder import Executable, build_command, assemble_command
from cmd2zip.execution.job_runner import JobRunner, JobResult, OutputSource
from cmd2zip.execution.scheduler import ExecutionScheduler, RunSummary, TaskCounter
from cmd2zip.execution.sources import open_command_source, is_comment

__all__ = [
    'Executable',
    'build_command',
    'assemble_command',
    'JobRunner',
    'JobResult',
    'OutputSource',
    'ExecutionScheduler',
    'RunSummary',
    'TaskCounter',
    'open_command_source',
    'is_comment'
]
