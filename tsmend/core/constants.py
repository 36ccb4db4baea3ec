"""Shared constants for tsmend.

This module contains constants that are used across multiple modules
to avoid duplication and ensure consistency.
"""

import re

# =============================================================================
# Preprocessing
# =============================================================================

FENCE_MARKER = "```"

# Client-only API usage that requires the client directive
CLIENT_HOOK_PATTERNS = [
    re.compile(r"\buseState\s*\("),
    re.compile(r"\buseEffect\s*\("),
    re.compile(r"\bonClick\s*="),
]

# Matches an existing directive line: "use client" / 'use client', optional ;
CLIENT_DIRECTIVE_RE = re.compile(r"""^\s*(["'])use client\1\s*;?\s*$""", re.MULTILINE)

HASH_BANG_PREFIX = "#!"

# =============================================================================
# TypeScript diagnostic codes
# =============================================================================

# Module '"x"' has no default export. Did you mean to use 'import { X } from "x"' instead?
TS_NO_DEFAULT_EXPORT = 2613

# Module '"x"' has no exported member 'X'. Did you mean to use 'import X from "x"' instead?
TS_NO_EXPORTED_MEMBER_USE_DEFAULT = 2614

# Cannot find name 'X'.
TS_CANNOT_FIND_NAME = 2304

# Cannot find name 'X'. Did you mean 'Y'?
TS_CANNOT_FIND_NAME_SUGGESTION = 2552

# Cannot find module 'x' or its corresponding type declarations.
TS_CANNOT_FIND_MODULE = 2307

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_QUOTE = '"'
