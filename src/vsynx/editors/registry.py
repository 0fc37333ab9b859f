"""Static identifiers of the editors the backend knows about.

The backend owns the authoritative profiles (paths, CLI commands). This
module only pins the ids the orchestration layer refers to by name: the
default source editor, the VS Code family members that ship an install
CLI, and the order in which an install target is picked at startup.

Editors:
    VS Code family: vscode, vscode-insiders, vscodium (each has a CLI).
    Clones: windsurf, cursor, kiro (no CLI; sync targets only).
"""

from __future__ import annotations

VSCODE: str = "vscode"
VSCODE_INSIDERS: str = "vscode-insiders"
VSCODIUM: str = "vscodium"

# Install CLI per VS Code family editor.
CLI_COMMANDS: dict[str, str] = {
    VSCODE: "code",
    VSCODE_INSIDERS: "code-insiders",
    VSCODIUM: "codium",
}

# Preference order when choosing the default install target.
INSTALL_TARGET_PREFERENCE: tuple[str, ...] = (VSCODE, VSCODE_INSIDERS, VSCODIUM)
