"""
Tab-completion table for the system76-power command line tool.

The table is static: the previous word on the command line selects a
list of candidates, and the word being typed filters it by prefix.
"""

COMMAND = "system76-power"

TOP_LEVEL = ["charge-thresholds", "daemon", "graphics", "help", "profile", "--version", "--help"]

NEXT_TOKENS = {
    "graphics": ["compute", "integrated", "hybrid", "nvidia", "power", "switchable", "--help"],
    "daemon": ["--quiet", "--verbose", "--help"],
    "profile": ["battery", "balanced", "performance", "--help"],
    "power": ["auto", "on", "off", "--help"],
    "charge-thresholds": ["--profile", "--list-profiles", "--help"],
    "--profile": ["full_charge", "balanced", "max_lifespan", "--help"],
}

# Values after which only --help makes sense
LEAF_TOKENS = [
    "battery",
    "balanced",
    "compute",
    "integrated",
    "hybrid",
    "nvidia",
    "performance",
    "switchable",
    "on",
    "off",
    "auto",
]

# Nothing is offered after these
TERMINAL_TOKENS = ["help", "--help", "-h", "-v", "--version"]


def candidates(prev: str) -> list[str]:
    """Return the full candidate list for the word following prev."""
    if prev in NEXT_TOKENS:
        return list(NEXT_TOKENS[prev])
    if prev in LEAF_TOKENS:
        return ["--help"]
    if prev in TERMINAL_TOKENS:
        return []
    return list(TOP_LEVEL)


def suggest(prev: str, cur: str = "") -> list[str]:
    """
    Suggest completions for the word being typed.

    Args:
        prev: The previous word on the command line
        cur: The (possibly empty) word being completed

    Returns:
        Candidates starting with cur, in table order
    """
    return [word for word in candidates(prev) if word.startswith(cur)]


def complete(words: list[str]) -> list[str]:
    """Complete the last word of a command line split into words."""
    if not words:
        return list(TOP_LEVEL)
    cur = words[-1]
    prev = words[-2] if len(words) > 1 else COMMAND
    return suggest(prev, cur)


def render_bash(command: str = COMMAND) -> str:
    """Render the table as a bash completion script."""
    func = "_" + command.replace("-", "_")
    lines = [
        "# bash completion for " + command,
        "",
        f"{func}()",
        "{",
        "    local cur prev",
        "    COMPREPLY=()",
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    prev="${COMP_WORDS[COMP_CWORD-1]}"',
        "",
        '    case "${prev}" in',
    ]

    for token, words in NEXT_TOKENS.items():
        lines.extend(_bash_case(token, words))
    lines.extend(_bash_case("|".join(LEAF_TOKENS), ["--help"]))
    lines.extend(
        [
            f"        {'|'.join(TERMINAL_TOKENS)})",
            "            return 0",
            "            ;;",
            "    esac",
            "",
            f'    COMPREPLY=( $(compgen -W "{" ".join(TOP_LEVEL)}" -- "${{cur}}") )',
            "    return 0",
            "}",
            "",
            f"complete -F {func} {command}",
            "",
        ]
    )
    return "\n".join(lines)


def _bash_case(pattern: str, words: list[str]) -> list[str]:
    return [
        f"        {pattern})",
        f'            COMPREPLY=( $(compgen -W "{" ".join(words)}" -- "${{cur}}") )',
        "            return 0",
        "            ;;",
    ]
