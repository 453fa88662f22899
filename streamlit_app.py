from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List
import streamlit as st

from fk_ops import ConversionError, OPS, Resource, list_operations, run
from fk_ops.b64 import base64_to_text, text_to_base64
from fk_ops.binary import clamp_bytes, try_decode_utf8
from fk_ops.config import EngineSettings
from fk_ops.encoding import hex_encode
from fk_ops.log import configure_logger
from fk_ops.resources import StringOp
from fk_ops.strings import EmailParts, Step as ChainStep, resolve_step, run_step

SETTINGS = EngineSettings.from_env()
logger = configure_logger(SETTINGS.log_level)

APP = "FormatKitchen"
st.set_page_config(page_title=APP, page_icon="🍳", layout="wide")

# ------------------------------
# Session model
# ------------------------------
@dataclass
class Step:
    op_key: str
    enabled: bool = True
    params: Dict[str, Any] = field(default_factory=dict)
    def to_json(self):
        return {"op": self.op_key, "enabled": self.enabled, "options": self.params}

@dataclass
class Recipe:
    steps: List[Step]
    def to_json(self):
        return {"steps": [s.to_json() for s in self.steps]}

def recipe_from_json(obj: Dict[str, Any]) -> Recipe:
    # unknown step tags raise UnknownOperationError here, not later in the layout
    steps = [Step(op_key=resolve_step(it.get("op") or it.get("type")).value, enabled=bool(it.get("enabled", True)), params=it.get("options") or {})
             for it in obj.get("steps", [])]
    return Recipe(steps=steps)

if "recipe" not in st.session_state:
    st.session_state.recipe = Recipe(steps=[])
if "input_bytes" not in st.session_state:
    st.session_state.input_bytes = b""

# ------------------------------
# Helpers: recipe share string
# ------------------------------
def recipe_to_b64(recipe: Recipe) -> str:
    return text_to_base64(json.dumps(recipe.to_json(), separators=(",", ":")))

def recipe_from_b64(s: str) -> Recipe:
    return recipe_from_json(json.loads(base64_to_text(s)))

def load_recipe_from_url_if_any():
    shared = st.query_params.get("r")
    if shared:
        try:
            st.session_state.recipe = recipe_from_b64(shared)
            st.toast("Loaded recipe from URL", icon="✅")
        except (ConversionError, AttributeError, json.JSONDecodeError) as e:
            st.toast(f"Failed to load recipe: {e}", icon="⚠️")

def param_widgets(schema: Dict[str, Any], values: Dict[str, Any], key_prefix: str) -> Dict[str, Any]:
    cols = st.columns(3)
    for slot, (pname, default) in enumerate(schema.items()):
        with cols[slot % 3]:
            current = values.get(pname, default)
            if isinstance(default, list):
                values[pname] = st.selectbox(pname, options=default, key=f"{key_prefix}_{pname}")
            elif isinstance(default, bool):
                values[pname] = st.checkbox(pname, value=bool(current), key=f"{key_prefix}_{pname}")
            elif isinstance(default, int):
                values[pname] = int(st.number_input(pname, value=int(current), step=1, key=f"{key_prefix}_{pname}"))
            else:
                values[pname] = st.text_input(pname, value=str(current), key=f"{key_prefix}_{pname}")
    return values

def show_result(result: Any, output_hint: str):
    if isinstance(result, EmailParts):
        result = result.to_dict()
    if isinstance(result, (bytes, bytearray)):
        st.download_button("Download bytes", bytes(result), file_name="output.bin", use_container_width=True)
        st.code(hex_encode(bytes(result))[:16000] or "∅")
        st.caption(f"Bytes out: {len(result)}")
    elif output_hint == "json" or isinstance(result, (dict, list)):
        st.code(json.dumps(result, indent=2, ensure_ascii=False, default=str), language="json")
    else:
        st.code(str(result)[:8000] or "∅")

load_recipe_from_url_if_any()

# ------------------------------
# Top toolbar
# ------------------------------
c1, c2, c3 = st.columns([1.2, 2.6, 1.8])
with c1:
    st.markdown("### 🍳 FormatKitchen")

with c2:
    export_col1, export_col2 = st.columns(2)
    with export_col1:
        data = json.dumps(st.session_state.recipe.to_json(), indent=2).encode("utf-8")
        st.download_button("💾 Save Recipe JSON", data, file_name="recipe.json", mime="application/json", use_container_width=True)
    with export_col2:
        if st.button("🔗 Copy Share Link", use_container_width=True):
            st.code(f"?r={recipe_to_b64(st.session_state.recipe)}")

with c3:
    uploaded = st.file_uploader("Load Recipe JSON", type=["json"])
    if uploaded:
        try:
            st.session_state.recipe = recipe_from_json(json.loads(uploaded.read().decode("utf-8")))
            st.success("Recipe loaded.")
        except (ConversionError, AttributeError, UnicodeDecodeError, json.JSONDecodeError) as e:
            st.error(f"Load failed: {e}")

st.divider()

# ------------------------------
# Workspace layout
# ------------------------------
left, middle, right = st.columns([2, 3, 2])

# --- Left: Input
with left:
    st.subheader("📝 Input")
    mode = st.radio("Input Type", ["Text", "File (bytes)"], horizontal=True)

    if mode == "Text":
        txt = st.text_area("Paste text/data", height=220, value=try_decode_utf8(st.session_state.input_bytes))
        st.session_state.input_bytes = clamp_bytes(txt.encode("utf-8", errors="replace"), SETTINGS.max_input_bytes)
    else:
        f = st.file_uploader(f"Upload a file (≤ {SETTINGS.max_input_bytes // 1_000_000} MB)", accept_multiple_files=False)
        if f:
            st.session_state.input_bytes = clamp_bytes(f.read(), SETTINGS.max_input_bytes)
            st.info(f"Loaded {len(st.session_state.input_bytes)} bytes.")

    with st.expander("Preview & Formats"):
        t1, t2 = st.tabs(["Text", "Hex"])
        with t1: st.code(try_decode_utf8(st.session_state.input_bytes)[:4000] or "∅", language="text")
        with t2: st.code(hex_encode(st.session_state.input_bytes)[:8000] or "∅", language="text")

# --- Middle: conversion or recipe builder
with middle:
    workbench = st.radio("Workbench", ["Convert", "String Recipe"], horizontal=True)

    if workbench == "Convert":
        st.subheader("🔁 Convert")
        resource = st.selectbox("Resource", [r.value for r in Resource if r is not Resource.STRING])
        ops = {op.name: op for op in list_operations(resource)}
        op = ops[st.selectbox("Operation", list(ops))]
        params = param_widgets(op.params_schema, {}, f"conv_{op.key.value}")
    else:
        st.subheader("🔧 Recipe Builder")
        string_ops = [o.value for o in StringOp if o is not StringOp.APPLY_MULTIPLE]
        cols = st.columns([2, 1, 1])
        with cols[0]:
            new_op = st.selectbox("Add operation", ["—"] + string_ops)
        with cols[1]:
            if st.button("➕ Add") and new_op != "—":
                st.session_state.recipe.steps.append(Step(op_key=new_op))
                st.rerun()
        with cols[2]:
            if st.button("🧹 Clear"):
                st.session_state.recipe = Recipe(steps=[])
                st.rerun()

        steps = st.session_state.recipe.steps
        for idx, step in enumerate(steps):
            reg = OPS[(Resource.STRING, StringOp(step.op_key))]
            with st.expander(f"Step {idx+1}: {reg.name}", expanded=False):
                top = st.columns([0.9, 0.7, 0.7, 0.7])
                with top[0]:
                    step.enabled = st.checkbox("Enabled", value=step.enabled, key=f"en_{idx}")
                with top[1]:
                    if st.button("⬆️ Up", key=f"up_{idx}") and idx > 0:
                        steps[idx-1], steps[idx] = steps[idx], steps[idx-1]
                        st.rerun()
                with top[2]:
                    if st.button("⬇️ Down", key=f"down_{idx}") and idx < len(steps)-1:
                        steps[idx+1], steps[idx] = steps[idx], steps[idx+1]
                        st.rerun()
                with top[3]:
                    if st.button("🗑️ Remove", key=f"rm_{idx}"):
                        del steps[idx]
                        st.rerun()
                step.params = param_widgets(reg.params_schema, step.params, f"step_{idx}")

# --- Right: Output
with right:
    st.subheader("📤 Output")
    raw = st.session_state.input_bytes

    if workbench == "Convert":
        try:
            if op.input_hint == "bytes":
                payload = raw
            elif op.input_hint == "json":
                payload = json.loads(try_decode_utf8(raw) or "null")
            else:
                payload = try_decode_utf8(raw)
            show_result(run(op.resource, op.key, payload, params), op.output_hint)
        except json.JSONDecodeError as e:
            st.error(f"Input is not valid JSON: {e}")
        except ConversionError as e:
            logger.info("conversion failed: %s", e)
            st.error(str(e))
    else:
        value: Any = try_decode_utf8(raw)
        intermediate_previews = st.checkbox("Show intermediate outputs", value=False)
        errors: List[str] = []
        for idx, step in enumerate(st.session_state.recipe.steps):
            if not step.enabled:
                continue
            try:
                value = run_step(value, ChainStep(StringOp(step.op_key), step.params), idx + 1)
                if intermediate_previews:
                    with st.expander(f"After step {idx+1}: {step.op_key}"):
                        show_result(value, "text")
            except ConversionError as e:
                errors.append(f"Step {idx+1} ({step.op_key}): {e}")
                break

        if errors:
            st.error("\n".join(errors))
        else:
            show_result(value, "text")

st.markdown("---")
st.caption("FormatKitchen • conversions run locally, nothing leaves the page")
