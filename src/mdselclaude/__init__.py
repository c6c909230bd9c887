"""mdsel-claude: the mdsel Markdown selector CLI as agent tools, plus a read reminder hook."""

__version__ = "1.0.0"

# Public API
from mdselclaude.config import Config, get_config, load_config
from mdselclaude.errors import ConfigurationError, MdselError
from mdselclaude.executor import (
    ExecutionOptions,
    ExecutionResult,
    Executor,
    MdselExecutor,
)
from mdselclaude.gate import (
    REMINDER_MESSAGE,
    HookInput,
    HookOutput,
    HookStyle,
    WordCountGate,
    count_words,
)

__all__ = [
    "__version__",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Errors
    "MdselError",
    "ConfigurationError",
    # Execution engine
    "ExecutionOptions",
    "ExecutionResult",
    "Executor",
    "MdselExecutor",
    # Reminder gate
    "REMINDER_MESSAGE",
    "HookInput",
    "HookOutput",
    "HookStyle",
    "WordCountGate",
    "count_words",
]
