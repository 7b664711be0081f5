from __future__ import annotations

import logging
import math
import secrets
from typing import Any, Mapping

from flask import Flask, Response, jsonify, request, session

from .background import GradientParams, encode_png, plane_to_lc
from .oklch import COMPONENTS, OklchColor
from .presets import PRESETS, get_preset
from .sessions import PickerSession, SessionStore
from .transform import Transform, check_bounds

log = logging.getLogger(__name__)

DEFAULT_CONFIG: Mapping[str, Any] = {
    "SECRET_KEY": None,  # generated per process unless configured
    "MAX_BACKGROUND_SIZE": 2048,  # device pixels per side
    "DEFAULT_MAX_CHROMA": 0.4,
    "BACKGROUND_WIDTH": 280,
    "BACKGROUND_HEIGHT": 280,
    "LOG_LEVEL": "INFO",
    "MAX_SESSIONS": 256,  # least recently used are evicted beyond this
    "SESSION_IDLE_SECONDS": 3600,
}

SESSION_KEY = "picker"


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("expected a JSON object")
    return body


def _float_arg(name: str, default: float) -> float:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return float(default)
    try:
        v = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number") from None
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite")
    return v


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return int(default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer") from None


def _number(body: Mapping[str, Any], key: str) -> float:
    raw = body.get(key)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"field '{key}' must be a number")
    if not math.isfinite(raw):
        raise ValueError(f"field '{key}' must be finite")
    return float(raw)


def _max_chroma(body: Mapping[str, Any], default: float) -> float:
    value = _number(body, "max_chroma") if "max_chroma" in body else float(default)
    if value < 0:
        raise ValueError("max_chroma must not be negative")
    return value


def parse_origin(body: Mapping[str, Any]) -> OklchColor:
    """Origin color from a preset reference, a CSS string or raw components."""
    if "preset" in body:
        return get_preset(body["preset"]).color
    if "css" in body:
        return OklchColor.parse(str(body["css"]))
    return OklchColor.from_mapping(body)


# ----------------------------- Flask app ----------------------------------


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env("OKLCH_PICKER")
    if config:
        app.config.from_mapping(config)
    if not app.config["SECRET_KEY"]:
        app.config["SECRET_KEY"] = secrets.token_hex(32)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"], format="%(levelname)s: %(message)s"
    )

    store = SessionStore(
        max_sessions=app.config["MAX_SESSIONS"],
        idle_seconds=app.config["SESSION_IDLE_SECONDS"],
    )
    app.extensions["oklch_picker.sessions"] = store

    def picker() -> PickerSession:
        picker_id, found = store.get_or_create(session.get(SESSION_KEY))
        session[SESSION_KEY] = picker_id
        return found

    def bad_request(exc: Exception, status: int = 400):
        msg = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
        return jsonify({"error": msg}), status

    def unknown_component(component: str):
        return (
            jsonify(
                {
                    "error": f"unknown component '{component}'",
                    "supported": COMPONENTS,
                }
            ),
            404,
        )

    @app.get("/api/state")
    def state():
        p = picker()
        with p.lock:
            return jsonify(p.engine.snapshot())

    @app.get("/api/presets")
    def presets():
        return jsonify(
            [
                {
                    "index": i,
                    "label": preset.label,
                    "color": preset.color.to_dict(),
                    "css": preset.color.to_css(),
                }
                for i, preset in enumerate(PRESETS)
            ]
        )

    @app.post("/api/origin")
    def set_origin():
        p = picker()
        try:
            color = parse_origin(_json_body())
        except (ValueError, KeyError) as exc:
            return bad_request(exc)
        with p.lock:
            p.engine.set_origin_color(color)
            return jsonify(p.engine.snapshot())

    @app.put("/api/transforms/<component>")
    def set_transform(component: str):
        if component not in COMPONENTS:
            return unknown_component(component)
        p = picker()
        try:
            transform = check_bounds(
                component,  # type: ignore[arg-type]
                Transform.from_mapping(_json_body()),
            )
        except ValueError as exc:
            return bad_request(exc)
        with p.lock:
            p.engine.set_transform(component, transform)  # type: ignore[arg-type]
            return jsonify(p.engine.snapshot())

    @app.post("/api/transforms/<component>/toggle")
    def toggle(component: str):
        if component not in COMPONENTS:
            return unknown_component(component)
        p = picker()
        with p.lock:
            p.engine.toggle_component(component)  # type: ignore[arg-type]
            return jsonify(p.engine.snapshot())

    @app.post("/api/transforms/<component>/reset")
    def reset(component: str):
        if component not in COMPONENTS:
            return unknown_component(component)
        p = picker()
        with p.lock:
            p.engine.reset_component(component)  # type: ignore[arg-type]
            return jsonify(p.engine.snapshot())

    @app.put("/api/components/<component>")
    def set_component(component: str):
        if component not in COMPONENTS:
            return unknown_component(component)
        p = picker()
        try:
            value = _number(_json_body(), "value")
        except ValueError as exc:
            return bad_request(exc)
        with p.lock:
            try:
                p.engine.set_component_value(component, value)  # type: ignore[arg-type]
            except ValueError as exc:
                return bad_request(exc)
            return jsonify(p.engine.snapshot())

    @app.put("/api/plane")
    def set_plane():
        p = picker()
        try:
            body = _json_body()
            if "x" in body or "y" in body:
                lightness, chroma = plane_to_lc(
                    _number(body, "x"),
                    _number(body, "y"),
                    _number(body, "width"),
                    _number(body, "height"),
                    _max_chroma(body, app.config["DEFAULT_MAX_CHROMA"]),
                )
            else:
                lightness, chroma = _number(body, "l"), _number(body, "c")
        except (TypeError, ValueError, ZeroDivisionError) as exc:
            return bad_request(ValueError(f"invalid plane position: {exc}"))
        with p.lock:
            try:
                p.engine.set_lightness_chroma(lightness, chroma)
            except ValueError as exc:
                return bad_request(exc)
            return jsonify(p.engine.snapshot())

    @app.get("/api/css")
    def css():
        p = picker()
        with p.lock:
            text = p.engine.to_css()
        return Response(text, mimetype="text/plain")

    @app.get("/api/background.png")
    def background():
        p = picker()
        with p.lock:
            current_hue = p.engine.result_color.h
        try:
            params = GradientParams(
                width=_int_arg("width", app.config["BACKGROUND_WIDTH"]),
                height=_int_arg("height", app.config["BACKGROUND_HEIGHT"]),
                hue=_float_arg("hue", current_hue),
                max_chroma=_float_arg("max_chroma", app.config["DEFAULT_MAX_CHROMA"]),
            ).scaled(_float_arg("dpr", 1.0))
        except ValueError as exc:
            return bad_request(exc)
        limit = int(app.config["MAX_BACKGROUND_SIZE"])
        if params.width > limit or params.height > limit:
            return bad_request(ValueError(f"background larger than {limit}px"))

        try:
            frame = p.background.update(
                params.width, params.height, params.hue, params.max_chroma
            )
        except Exception as exc:
            log.exception("Background render failed")
            return jsonify({"error": str(exc)}), 500
        if frame is None:
            return jsonify({"error": "superseded by a newer request"}), 409
        return Response(encode_png(frame.pixels), mimetype="image/png")

    return app


__all__ = ["DEFAULT_CONFIG", "create_app", "parse_origin"]
