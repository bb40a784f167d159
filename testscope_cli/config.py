"""Default settings for testscope runs."""

from __future__ import annotations

import os

CONFIG_FILE_NAME = os.environ.get("TESTSCOPE_CONFIG_NAME", "testscope.toml")
DEFAULT_BASE_REF = os.environ.get("TESTSCOPE_BASE_REF", "main")
DEFAULT_SELECTOR = ":default"
TEST_SUFFIX = "-test"

# Stripped from paths by both variants; a .cljc file may sit under any of them.
SOURCE_PATHS = (
    "src/clj",
    "src/cljs",
    "src/cljc",
    "test/clj",
    "test/cljs",
    "test/cljc",
    "src",
    "test",
)

# Primary variant: JVM Clojure
CLJ_EXTENSIONS = (".clj", ".cljc")
CLJ_TEST_COMMAND = ("lein", "eftest")

# Secondary variant: ClojureScript built by shadow-cljs
CLJS_EXTENSIONS = (".cljs", ".cljc")
CLJS_BUILD_CONFIG = "shadow-cljs.edn"
CLJS_BUILD_ID = "test"
CLJS_COMPILE_COMMAND = ("npx", "shadow-cljs", "compile", "test")
CLJS_RUN_COMMAND = ("npx", "karma", "start", "--single-run")
