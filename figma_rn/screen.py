"""ScreenIR: the classified tree plus its style and prop tables."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .ir import IRNode
from .props import ExtractedProps
from .styles import StyleBundle


@dataclass
class ScreenIR:
    name: str
    root: IRNode
    styles: StyleBundle
    props: ExtractedProps

    @property
    def tokens(self):
        return self.styles.tokens

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "root": self.root.to_dict(),
            "tokens": self.styles.tokens.to_dict(),
            "props": self.props.to_dict(),
        }


def save_ir(screen: ScreenIR, path: Union[str, Path]) -> None:
    """Write the ScreenIR as JSON for diagnostics."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(screen.to_dict(), f, indent=2, ensure_ascii=False)
