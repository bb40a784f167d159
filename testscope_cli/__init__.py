"""testscope: select the Clojure test namespaces affected by a change."""

__version__ = "0.3.0"
