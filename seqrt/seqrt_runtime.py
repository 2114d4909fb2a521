# seqrt_runtime.py

import re
import os
import json
import shlex
import inspect
import logging
import operator
from typing import Any, List, Optional, Literal, Dict
from dataclasses import dataclass, field

import pystache

from seqrt.seqrt_datatypes import Sequence, Absent, NameNotFound
from seqrt.seqrt_printer import Printer
from seqrt.seqrt_file import load_sequence, save_sequence

logger = logging.getLogger(__name__)

# ===================================================================
# 1. Literals & Helpers
# ===================================================================

_ASSIGN_RE = re.compile(r'^([A-Za-z_][\w-]*):\s*(.*)$')

# Comparison operators accepted by `find`
_FILTER_OPS = {
    '=': operator.eq,
    '!=': operator.ne,
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
}


def parse_literal(token: str) -> Any:
    """Decodes a command token as a JSON number, `true`, `false` or `null`.

    Every other token (including `10:30`, `01` and `yes`) stays a string.
    """
    try:
        value = json.loads(token)
    except json.JSONDecodeError:
        return token
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return token


# ===================================================================
# 2. The Standard Library
# ===================================================================

class StdLib:
    """Contains Python implementations for all runner commands.

    Each `_name` method becomes the command `name` (underscores turn into
    dashes). Arguments arrive as raw tokens; commands resolve them against
    the runner's bindings themselves, since some arguments are names and
    others are literals.
    """
    def __init__(self, runner: 'CommandRunner'):
        self.runner = runner

    # --- Construction & Access ---
    def _of(self, *tokens):
        return Sequence.of(*(parse_literal(t) for t in tokens))
    def _len(self, seq): return len(self.runner.sequence(seq))
    def _at(self, seq, index):
        return self.runner.sequence(seq).at(self.runner.value(index))
    def _set(self, seq, index, value):
        target = self.runner.sequence(seq)
        item = self.runner.value(value)
        if item is target:
            raise ValueError(f"cannot store '{seq}' inside itself")
        target[self.runner.value(index)] = item
        return target

    # --- Derivation ---
    def _concat(self, a, b):
        return self.runner.sequence(a).concat(self.runner.sequence(b))
    def _join(self, seq, separator=","):
        # The separator is always taken verbatim
        return self.runner.sequence(seq).join(separator)
    def _map(self, seq, template):
        """Renders every element through a mustache template exposing `value` and `index`."""
        renderer = pystache.Renderer(escape=lambda u: u)
        def render(value, index):
            shown = "" if value is Absent or value is None else value
            return renderer.render(template, {"value": shown, "index": index})
        return self.runner.sequence(seq).map(render)
    def _find(self, seq, op, rhs):
        compare = _FILTER_OPS.get(op)
        if compare is None:
            raise ValueError(f"Unknown find operator {op!r}; expected one of {' '.join(_FILTER_OPS)}")
        expected = self.runner.value(rhs)
        def predicate(value, index):
            if value is Absent:
                return False
            return compare(value, expected)
        return self.runner.sequence(seq).find(predicate)

    # --- Resources ---
    async def _load(self, locator):
        return await load_sequence(locator, base_dir=self.runner.source_dir)
    async def _save(self, seq, locator):
        await save_sequence(locator, self.runner.sequence(seq), base_dir=self.runner.source_dir)
        return None

    # --- Output ---
    def _emit(self, *tokens):
        """Generates a stdout side-effect event for the host application."""
        printer = Printer()
        parts = []
        for tok in tokens:
            value = self.runner.value(tok)
            parts.append(value if isinstance(value, str) else printer.pformat(value))
        self.runner.side_effects.append({"topics": ["stdout"], "message": " ".join(parts)})
        return None


# ===================================================================
# 3. Runner
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of a script execution."""
    status: Literal['success', 'error']
    value: Any = None
    error_message: Optional[str] = None
    line: Optional[int] = None
    side_effects: List[Dict] = field(default_factory=list)

    def format_error(self) -> str:
        """Formats an error message with the line number if available."""
        if self.status != 'error':
            return ""
        msg = str(self.error_message or "Unknown error")
        if self.line is not None and not msg.startswith("Error on line "):
            return f"Error on line {self.line}: {msg}"
        return msg


class CommandRunner:
    """Parses and executes line-oriented sequence scripts.

    Bindings live on the runner and persist across `handle_script` calls,
    so a REPL session keeps its names. A fresh runner starts with none.
    """

    def __init__(self):
        self.bindings: Dict[str, Any] = {}
        self.side_effects: List[Dict] = []
        self.source_dir: Optional[str] = None  # directory of the current source file, if known

        self.commands: Dict[str, Any] = {}
        stdlib = StdLib(self)
        for name, member in inspect.getmembers(stdlib):
            if name.startswith('_') and not name.startswith('__') and callable(member):
                self.commands[name[1:].replace('_', '-')] = member

    # --- Argument resolution ---

    def value(self, token: str) -> Any:
        """A bound name resolves to its value; any other token is a literal."""
        if token in self.bindings:
            return self.bindings[token]
        return parse_literal(token)

    def sequence(self, token: str) -> Sequence:
        if token not in self.bindings:
            raise NameNotFound(token)
        value = self.bindings[token]
        if not isinstance(value, Sequence):
            raise TypeError(f"'{token}' is a {type(value).__name__}, not a Sequence")
        return value

    # --- Execution ---

    async def run_line(self, line: str) -> Any:
        target = None
        m = _ASSIGN_RE.match(line)
        if m:
            target, line = m.group(1), m.group(2)
        tokens = shlex.split(line)
        if not tokens:
            raise SyntaxError("missing command")
        head, args = tokens[0], tokens[1:]
        if head in self.commands:
            logger.debug("dispatch %s %r", head, args)
            result = self.commands[head](*args)
            if inspect.isawaitable(result):
                result = await result
        elif not args:
            if head not in self.bindings:
                raise NameNotFound(head)
            result = self.bindings[head]
        else:
            raise NameNotFound(head)
        if target is not None:
            self.bindings[target] = result
        return result

    def _format_runtime_error(self, e: Exception) -> str:
        match e:
            case NameNotFound() as nf:
                return f"NameNotFound: {nf.name}"
            case FileNotFoundError():
                return f"FileNotFound: {e.filename or e}"
            case TypeError() if "positional argument" in str(e):
                return "TypeError: invalid-args"
            case _:
                return f"{type(e).__name__}: {e}"

    async def handle_script(self, source_code: str) -> 'ExecutionResult':
        """The main entry point to execute a script."""
        self.side_effects = []
        if self.source_dir is None:
            self.source_dir = os.getcwd()
        result = None
        lineno = 0
        try:
            for lineno, raw in enumerate(source_code.splitlines(), start=1):
                line = raw.strip()
                if not line or line.startswith("--"):
                    continue
                result = await self.run_line(line)
        except Exception as e:
            err_msg = self._format_runtime_error(e)
            logger.debug("script failed on line %d: %s", lineno, err_msg)
            # Emit consolidated stderr side-effect
            self.side_effects.append({'topics': ['stderr'], 'message': err_msg})
            return ExecutionResult(
                status='error',
                error_message=err_msg,
                line=lineno or None,
                side_effects=self.side_effects
            )
        return ExecutionResult(
            status='success',
            value=result,
            side_effects=self.side_effects
        )
