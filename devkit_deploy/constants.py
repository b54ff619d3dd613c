from typing import Final


SKILL_DOC_FILENAME: Final[str] = "SKILL.md"
SKILL_PACKAGE_SUFFIX: Final[str] = "-skill"
USAGE_GUIDE_FILENAME: Final[str] = "README.md"
GIT_DIRNAME: Final[str] = ".git"
NODE_MODULES_DIRNAME: Final[str] = "node_modules"
PACKAGE_MANIFEST_FILENAME: Final[str] = "package.json"

TEMP_DIR_PREFIX: Final[str] = ".devkit-deploy-"
TEMP_MANIFEST_NAME: Final[str] = "devkit-deploy-temp"

LOCAL_REPO_ROOT: Final[str] = ".devkit-deploy"
GLOBAL_REPO_ROOT: Final[str] = "devkit-deploy"
MCP_REPOS_DIRNAME: Final[str] = "mcp-repos"

NPM_INSTALL_ARGS: Final[tuple[str, ...]] = (
    "install",
    "--omit=dev",
    "--no-audit",
    "--no-fund",
)

DEFAULT_SKILLS_CANDIDATES: Final[tuple[str, ...]] = (
    "skills",
    ".github/skills",
    ".claude/skills",
)
