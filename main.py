"""OKLCH relative color picker backend (Flask).

Serves the JSON API a picker UI drives: origin color selection, per-component
transforms (multiply / add / absolute), the CSS relative color output and the
lightness × chroma background plane as PNG.

Usage
-----
$ pip install -e .
$ python main.py                 # starts on http://127.0.0.1:5000

Configuration comes from OKLCH_PICKER_* environment variables, e.g.
OKLCH_PICKER_LOG_LEVEL=DEBUG or OKLCH_PICKER_SECRET_KEY=...
"""

from __future__ import annotations

from oklch_picker.app import create_app

if __name__ == "__main__":
    # threaded=True is fine: each picker session serializes on its own lock.
    create_app().run(debug=False, threaded=True)
