"""Make dataLayer history safe to hand back from the page.

GTM pushes can carry live host objects (most commonly DOM nodes from click and
form triggers). Those are cyclic and cannot cross the automation boundary, so
the history is serialized in the page with a ``JSON.stringify`` replacer built
from a list of :class:`Replacer` rules. Each rule pairs an in-page predicate with
the placeholder string that replaces any value it matches.
"""
from dataclasses import dataclass
from typing import Iterable, List


HTML_OBJECT_PLACEHOLDER = "[HTMLObject]"


@dataclass(frozen=True)
class Replacer:
    """A predicate/placeholder pair applied during in-page serialization.

    ``predicate`` is the source of a JavaScript function expression taking the
    value under inspection and returning a truthy result when it should be
    replaced by ``placeholder``.
    """
    predicate: str
    placeholder: str

    def __post_init__(self) -> None:
        if not self.predicate or not self.predicate.strip():
            raise ValueError("Replacer predicate must be a non-empty JavaScript function")


DOM_NODE_REPLACER = Replacer(
    predicate="(value) => typeof value === 'object' && value !== null && value.nodeType > 0",
    placeholder=HTML_OBJECT_PLACEHOLDER,
)

DEFAULT_REPLACERS = (DOM_NODE_REPLACER,)


def build_history_script(replacers: Iterable[Replacer]) -> str:
    """Return the in-page function that serializes the whole dataLayer.

    The function takes ``{dataLayerName, placeholders}`` and resolves to
    ``{ok: true, value: [...]}`` or ``{ok: false, error: "..."}``.
    """
    predicates: List[str] = [r.predicate for r in replacers]
    tests = ",\n        ".join(f"({p})" for p in predicates)
    return f"""(args) => {{
    const tests = [
        {tests}
    ];
    try {{
        const serialized = JSON.stringify(window[args.dataLayerName], function (key, value) {{
            for (let i = 0; i < tests.length; i++) {{
                if (tests[i](value)) {{
                    return args.placeholders[i];
                }}
            }}
            return value;
        }});
        return {{ok: true, value: JSON.parse(serialized)}};
    }} catch (e) {{
        return {{ok: false, error: String((e && e.message) || e)}};
    }}
}}"""


def placeholders_for(replacers: Iterable[Replacer]) -> List[str]:
    return [r.placeholder for r in replacers]
