# smartcomment/utils/utils.py
"""
smartcomment.utils.utils
========================

Core helpers for the smartcomment command line.

Key functionalities include:
- Embedded defaults: `DEFAULT_CONFIG` holds the comment-syntax table and the
  file-name/extension table the syntax detector looks things up in, so the
  tool runs without any configuration file.
- Layered configuration: the defaults are recursively merged with the user's
  `~/.config/smartcomment/config.toml` (or an explicit path).
- Environment: `~/.config/smartcomment/.env` is loaded at start-up so
  `SMARTCOMMENT_*` variables can be kept next to the config.
- Encoding-preserving reads and atomic, mode-preserving writes.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import chardet
import toml
from dotenv import load_dotenv

logger = logging.getLogger("smartcomment")

# --- Constants ---
APP_NAME = "smartcomment"
CONFIG_ENV_VAR = "SMARTCOMMENT_CONFIG"
CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75

# Fallback configuration; user settings are merged on top of it.
# `comments`: syntax name -> `line_prefix` (str or ordered list, first one is
# used for commenting) or `block_delims` ([open, close]).
# `supported_formats`: syntax name -> exact file names and extensions.
DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "console_level": "WARNING",
        "file": "",
        "file_level": "DEBUG",
        "separate_error_log": False,
    },
    "comments": {
        "python": {"line_prefix": "# "}, "ruby": {"line_prefix": "# "},
        "perl": {"line_prefix": "# "}, "lua": {"line_prefix": "-- "},
        "javascript": {"line_prefix": "// "}, "typescript": {"line_prefix": "// "},
        "php": {"line_prefix": ["// ", "# "]},
        "html": {"block_delims": ["<!--", "-->"]}, "xml": {"block_delims": ["<!--", "-->"]},
        "css": {"block_delims": ["/*", "*/"]}, "scss": {"line_prefix": "// "},
        "graphql": {"line_prefix": "# "}, "c": {"line_prefix": "// "},
        "cpp": {"line_prefix": "// "}, "csharp": {"line_prefix": "// "},
        "java": {"line_prefix": "// "}, "go": {"line_prefix": "// "},
        "rust": {"line_prefix": "// "}, "swift": {"line_prefix": "// "},
        "kotlin": {"line_prefix": "// "}, "scala": {"line_prefix": "// "},
        "dart": {"line_prefix": "// "}, "haskell": {"line_prefix": "-- "},
        "elixir": {"line_prefix": "# "}, "erlang": {"line_prefix": "% "},
        "clojure": {"line_prefix": [";;", ";"]}, "fsharp": {"line_prefix": "// "},
        "ocaml": {"block_delims": ["(*", "*)"]}, "shell": {"line_prefix": "# "},
        "fish": {"line_prefix": "# "}, "powershell": {"line_prefix": "# "},
        "dockerfile": {"line_prefix": "# "}, "makefile": {"line_prefix": "# "},
        "terraform": {"line_prefix": ["# ", "// "]}, "nix": {"line_prefix": "# "},
        "vim": {"line_prefix": '" '}, "assembly": {"line_prefix": "; "},
        "sql": {"line_prefix": "-- "}, "yaml": {"line_prefix": "# "},
        "toml": {"line_prefix": "# "}, "ini": {"line_prefix": ["; ", "# "]},
        "conf": {"line_prefix": "# "}, "xdefaults": {"line_prefix": "! "},
        "markdown": {"block_delims": ["<!--", "-->"]}, "latex": {"line_prefix": "% "},
        "r": {"line_prefix": "# "}, "julia": {"line_prefix": "# "},
        "matlab": {"line_prefix": "% "}, "nim": {"line_prefix": "# "},
        "crystal": {"line_prefix": "# "}, "zig": {"line_prefix": "// "},
        "bat": {"line_prefix": ["REM ", "::"]}, "emacslisp": {"line_prefix": [";;", ";"]},
        "json5": {"line_prefix": "// "}, "jsonc": {"line_prefix": "// "},
    },
    "supported_formats": {
        "python": ["py", "pyw", "pyi"], "ruby": ["rb", "rake", "gemspec", "Gemfile", "Rakefile"],
        "perl": ["pl", "pm", "t"], "lua": ["lua"],
        "javascript": ["js", "mjs", "cjs", "jsx"], "typescript": ["ts", "tsx", "mts", "cts"],
        "php": ["php", "phtml"], "html": ["html", "htm", "xhtml"],
        "xml": ["xml", "xsd", "xsl", "xslt", "plist", "svg"], "css": ["css"],
        "scss": ["scss", "sass", "less"], "graphql": ["graphql", "gql"],
        "c": ["c", "h"], "cpp": ["cpp", "cxx", "cc", "hpp", "hxx", "hh"],
        "csharp": ["cs"], "java": ["java"], "go": ["go"], "rust": ["rs"],
        "swift": ["swift"], "kotlin": ["kt", "kts"], "scala": ["scala", "sc"],
        "dart": ["dart"], "haskell": ["hs"], "elixir": ["ex", "exs"], "erlang": ["erl", "hrl"],
        "clojure": ["clj", "cljs", "edn"], "fsharp": ["fs", "fsx"], "ocaml": ["ml", "mli"],
        "shell": [
            "sh", "bash", "zsh", "ksh", "dash", "ash",
            ".bashrc", ".bash_profile", ".bash_aliases", ".profile", ".zshrc", ".zshenv",
            ".zprofile", ".xinitrc", ".xprofile", "PKGBUILD",
        ],
        "fish": ["fish"], "powershell": ["ps1", "psm1", "psd1"],
        "dockerfile": ["Dockerfile", "dockerfile", "Containerfile"],
        "makefile": ["Makefile", "makefile", "GNUmakefile", "mk", "mak"],
        "terraform": ["tf", "tfvars", "hcl"], "nix": ["nix"],
        "vim": ["vim", ".vimrc", ".gvimrc", "vimrc"], "assembly": ["asm", "s"],
        "sql": ["sql"], "yaml": ["yaml", "yml"], "toml": ["toml"],
        "ini": ["ini", "cfg", "desktop", "editorconfig", ".editorconfig"],
        "conf": [
            "conf", "config", "rc", ".gitconfig", ".gitignore", ".tmux.conf", ".inputrc",
            "dunstrc", "picom.conf", "env", ".env",
        ],
        "xdefaults": [".Xresources", ".Xdefaults", "Xresources", "xresources"],
        "markdown": ["md", "markdown"], "latex": ["tex", "sty", "cls"],
        "r": ["r"], "julia": ["jl"], "matlab": ["m"], "nim": ["nim"],
        "crystal": ["cr"], "zig": ["zig"], "bat": ["bat", "cmd"],
        "emacslisp": ["el", ".emacs"], "json5": ["json5"], "jsonc": ["jsonc"],
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns the user configuration directory, honouring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME


def load_environment() -> None:
    """Loads `<config dir>/.env` into the process environment if present.

    Variables already set in the environment win over the file.
    """
    try:
        dotenv_path = get_config_dir() / ".env"
        if dotenv_path.is_file():
            load_dotenv(dotenv_path=dotenv_path, override=False)
            logger.debug(f"Loaded environment from {dotenv_path}")
    except OSError as e:
        logger.warning(f"Could not load environment file: {e}")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's TOML config over them.

    The user file is, in order of preference, `config_path`, the file named
    by `SMARTCOMMENT_CONFIG`, or `<config dir>/config.toml`. A missing file is
    not an error; an unparsable one is logged and ignored.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    candidate = config_path or os.environ.get(CONFIG_ENV_VAR)
    user_config_path = Path(candidate).expanduser() if candidate else get_config_dir() / "config.toml"

    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")
    elif candidate:
        logger.warning(f"Config file '{user_config_path}' does not exist. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def decode_bytes(raw: bytes, source: str = "<stdin>") -> tuple[str, str]:
    """
    Decodes raw file content, returning ``(text, encoding)``.

    UTF-8 is tried first. If it fails, the chardet guess is used when its
    confidence is high enough, and latin-1 (which accepts any byte) last.
    Encoding the text again with the returned encoding gives back `raw`.
    """
    try:
        return raw.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        pass

    guess = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
    encoding = guess.get("encoding")
    confidence = guess.get("confidence") or 0.0
    logger.debug(f"Chardet detected encoding '{encoding}' with confidence {confidence:.2f} for '{source}'.")

    if encoding and confidence >= CHARDET_MIN_CONFIDENCE:
        try:
            text = raw.decode(encoding)
            if text.encode(encoding) == raw:
                return text, encoding
        except (UnicodeError, LookupError) as e:
            logger.warning(f"Failed to decode '{source}' as '{encoding}': {e}")

    logger.info(f"Falling back to latin-1 for '{source}'.")
    return raw.decode("latin-1"), "latin-1"


def read_text_file(path: str) -> tuple[str, str]:
    """Reads a whole file without newline translation; returns ``(text, encoding)``."""
    with open(path, "rb") as f:
        raw = f.read()
    return decode_bytes(raw, path)


def atomic_write(path: str, text: str, encoding: str = "utf-8") -> None:
    """
    Replaces the file at `path` with `text` in one atomic step.

    The content goes to a temporary file in the same directory as the real
    target (symlinks are followed, so the link itself survives), gets the
    original permission bits, is flushed to disk and is then swapped in with
    `os.replace`. On any failure the temporary file is removed and the
    original is left as it was.
    """
    target = os.path.realpath(path)
    directory = os.path.dirname(target) or "."
    data = text.encode(encoding)

    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(target)}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if os.path.exists(target):
            shutil.copymode(target, tmp_path)
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise
    logger.debug(f"Atomically replaced '{target}' ({len(data)} bytes).")
