import logging

import streamlit as st

from forms import FORM_FIELDS
from generator import MODE_LABELS, Mode, QrGenerator
from settings_store import QR_MARGIN_RANGE, QR_WIDTH_RANGE, load_settings, save_settings
from utils.download import get_download_context
from utils.qr_generator import ERROR_CORRECTION_LEVELS, EncodingOptions, PngQrEncoder


logger = logging.getLogger(__name__)

MODE_DESCRIPTIONS = {
    Mode.URL: ("Website URL", "Enter the full URL you want the QR code to link to."),
    Mode.TEXT: ("Plain Text", "Enter any text, like a message or a piece of information."),
    Mode.CONTACT: ("Contact Card", "Fill out the form to create a vCard for sharing contact details."),
}
SUBMIT_LABELS = {
    Mode.URL: "Generate QR Code",
    Mode.TEXT: "Generate QR Code",
    Mode.CONTACT: "Generate Contact QR",
}


def field_key(mode, field):
    return f"{mode.value}_{field}"


def discard_other_modes(active_mode):
    """Forget what was typed into every mode except *active_mode*."""
    for mode in Mode:
        if mode is active_mode:
            continue
        for field, _, _, _ in FORM_FIELDS[mode.value]:
            st.session_state.pop(field_key(mode, field), None)
    st.session_state["field_errors"] = {}


def get_generator(settings):
    options = EncodingOptions.from_settings(settings)
    generator = st.session_state.get("generator")
    if generator is None:
        generator = QrGenerator(PngQrEncoder())
        st.session_state["generator"] = generator
    generator.options = options
    generator.escape_vcard = bool(settings.get("vcard_escaping", True))
    return generator


def render_field(mode, field, label, placeholder, required, errors):
    text = f"{label} *" if required else label
    if mode is Mode.TEXT:
        st.text_area(text, placeholder=placeholder, key=field_key(mode, field), height=130)
    else:
        st.text_input(text, placeholder=placeholder, key=field_key(mode, field))
    if field in errors:
        st.error(errors[field])


def show_generator_form(mode, generator):
    title, description = MODE_DESCRIPTIONS[mode]
    st.header(title)
    st.caption(description)
    errors = st.session_state.get("field_errors", {})

    with st.form(f"{mode.value}_form"):
        if mode is Mode.CONTACT:
            col1, col2 = st.columns([1, 3])
            with col1:
                render_field(mode, *FORM_FIELDS[mode.value][0], errors)
            with col2:
                render_field(mode, *FORM_FIELDS[mode.value][1], errors)
            for field_def in FORM_FIELDS[mode.value][2:]:
                render_field(mode, *field_def, errors)
        else:
            for field_def in FORM_FIELDS[mode.value]:
                render_field(mode, *field_def, errors)
        submit = st.form_submit_button(
            SUBMIT_LABELS[mode], key=f"{mode.value}_submit", width="stretch"
        )

    if submit:
        values = {
            field: st.session_state.get(field_key(mode, field), "")
            for field, _, _, _ in FORM_FIELDS[mode.value]
        }
        submission = generator.submit(mode, values)
        st.session_state["field_errors"] = submission.field_errors
        if submission.notice is not None:
            st.session_state["notice"] = submission.notice
        elif submission.ok:
            st.session_state.pop("notice", None)
        st.rerun()


def show_notice():
    notice = st.session_state.get("notice")
    if notice is None:
        return
    st.error(f"**{notice.title}**  \n{notice.description}")
    if st.button("Dismiss", key="dismiss_notice"):
        st.session_state.pop("notice", None)
        st.rerun()


def show_preview(generator, settings):
    st.subheader("QR Code Preview")
    result = generator.last_result
    if result is None:
        st.info("Your generated QR code will appear here.")
    else:
        st.image(result.image.png, caption=result.payload[:60], width="stretch")

    download = get_download_context(result, settings.get("default_filename", "qr-code"))
    st.download_button(
        "Download PNG",
        data=download["data"],
        file_name=download["file_name"] or "qr-code.png",
        mime=download["mime"],
        disabled=not download["can_download"],
        width="stretch",
    )


def show_settings(settings):
    st.header("Settings")
    st.caption("Options used for every generated QR code.")

    levels = list(ERROR_CORRECTION_LEVELS)
    current_level = str(settings.get("error_correction", "H")).upper()
    with st.form("settings_form"):
        error_correction = st.selectbox(
            "Error correction level",
            levels,
            index=levels.index(current_level) if current_level in levels else levels.index("H"),
        )
        qr_width = st.number_input(
            "Image width (px)",
            min_value=QR_WIDTH_RANGE[0],
            max_value=QR_WIDTH_RANGE[1],
            value=int(settings.get("qr_width", 512)),
            step=32,
        )
        qr_margin = st.number_input(
            "Margin (modules)",
            min_value=QR_MARGIN_RANGE[0],
            max_value=QR_MARGIN_RANGE[1],
            value=int(settings.get("qr_margin", 2)),
            step=1,
        )
        fill_color = st.text_input("Module color", value=settings.get("fill_color", "black"))
        back_color = st.text_input("Background color", value=settings.get("back_color", "white"))
        default_filename = st.text_input(
            "Fallback download name",
            value=settings.get("default_filename", "qr-code"),
        )
        vcard_escaping = st.checkbox(
            "Escape , ; \\ and line breaks in contact cards",
            value=bool(settings.get("vcard_escaping", True)),
        )
        submitted = st.form_submit_button("Save Settings")

    if submitted:
        updated = {
            **settings,
            "error_correction": error_correction,
            "qr_width": int(qr_width),
            "qr_margin": int(qr_margin),
            "fill_color": fill_color.strip() or "black",
            "back_color": back_color.strip() or "white",
            "default_filename": default_filename.strip() or "qr-code",
            "vcard_escaping": vcard_escaping,
        }
        try:
            EncodingOptions.from_settings(updated)
        except ValueError as exc:
            st.error(str(exc))
            return
        save_settings(updated)
        st.success("Settings saved.")
        st.rerun()


settings = load_settings()
logging.basicConfig(level=settings["log_level"])

st.set_page_config(
    page_title="My Instant QR",
    page_icon="🔳",
    layout="wide",
)
st.title("🔳 My Instant QR")
st.caption("Generate QR codes simple, fast, and free.")

menu = st.sidebar.selectbox(
    "Menu",
    [MODE_LABELS[mode] for mode in Mode] + ["Settings"],
    key="menu",
)

if menu == "Settings":
    show_settings(settings)
else:
    active_mode = next(mode for mode in Mode if MODE_LABELS[mode] == menu)
    if st.session_state.get("active_mode") is not active_mode:
        logger.debug("Switched to %s mode", active_mode.value)
        discard_other_modes(active_mode)
        st.session_state["active_mode"] = active_mode

    generator = get_generator(settings)
    show_notice()
    form_col, preview_col = st.columns([3, 2])
    with form_col:
        show_generator_form(active_mode, generator)
    with preview_col:
        show_preview(generator, settings)
