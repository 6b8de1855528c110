"""Test DocumentComposer in TableEngine/core/stitcher.py"""

import sys
from pathlib import Path

import pytest

# Add project root directory to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from TableEngine.core import DocumentComposer, compose_fragments
from TableEngine.ir import FRAGMENT_NAMES


class TestDocumentComposer:
    """Test fragment ordering rules"""

    def setup_method(self):
        self.fragments = {name: f"<{name}>" for name in FRAGMENT_NAMES}

    def test_fragments_follow_declared_order(self):
        order = list(reversed(FRAGMENT_NAMES))
        assert compose_fragments(order, self.fragments) == "".join(f"<{name}>" for name in order)

    def test_empty_fragments_are_kept(self):
        self.fragments["heading"] = ""
        composed = compose_fragments(FRAGMENT_NAMES, self.fragments)
        assert composed == "".join(self.fragments[name] for name in FRAGMENT_NAMES)

    def test_missing_fragment_is_an_error(self):
        del self.fragments["footnotes"]
        with pytest.raises(ValueError, match="footnotes"):
            compose_fragments(FRAGMENT_NAMES, self.fragments)

    def test_order_must_be_a_permutation(self):
        with pytest.raises(ValueError):
            DocumentComposer(FRAGMENT_NAMES[:-1])
        with pytest.raises(ValueError):
            DocumentComposer(list(FRAGMENT_NAMES) + ["heading"])

    def test_duplicate_and_unknown_names(self):
        composer = DocumentComposer(FRAGMENT_NAMES).add("body", "x")
        with pytest.raises(ValueError):
            composer.add("body", "y")
        with pytest.raises(ValueError):
            composer.add("caption", "z")
        assert composer.fragments == {"body": "x"}
