__version__ = "0.1.0"

from seqrt.seqrt_datatypes import Sequence, Absent, NameNotFound
from seqrt.seqrt_runtime import CommandRunner, ExecutionResult

__all__ = ["Sequence", "Absent", "NameNotFound", "CommandRunner", "ExecutionResult"]
