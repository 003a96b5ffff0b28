"""Human-readable re-indentation of rendered markup."""

from .pretty import PrettyPrinter, pretty_html

__all__ = ["PrettyPrinter", "pretty_html"]
