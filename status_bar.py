import time

from fields import Overlay

KEY_HINTS = {
    "editing": "Esc: done | Shift+←/→: select | Ctrl+C/V: copy/paste",
    "headers": "n: new | d: delete | Space: toggle | Enter: edit",
    Overlay.METHOD_SELECTOR: "↑/↓: choose | Enter: apply | Esc: cancel",
    Overlay.SAVE_DIALOG: "↑/↓: collection | Enter: save | Esc: cancel",
    Overlay.COLLECTIONS: "↑/↓: move | Enter: open | n: new | d: delete | Esc: back",
    Overlay.HISTORY: "↑/↓: move | Enter: load | Esc: back",
    "normal": "Tab: next field | Enter: activate | q: quit",
}


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, field, overlay,
                  method, url, in_flight
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        overlay = context.get("overlay", Overlay.NONE)
        mode = context.get("mode", "NORMAL")
        field = context.get("field", "")
        if mode != "NORMAL":
            hint = KEY_HINTS["editing"]
        elif overlay in KEY_HINTS:
            hint = KEY_HINTS[overlay]
        elif field == "HEADERS":
            hint = KEY_HINTS["headers"]
        else:
            hint = KEY_HINTS["normal"]
        busy = " | sending…" if context.get("in_flight") else ""
        text = f" {mode} | {field}{busy} | {hint}"

    return text.ljust(width)[:width]


def status_context(state):
    return {
        "status_msg": state.status_msg,
        "status_until": state.status_msg_until,
        "mode": str(state.input_mode),
        "field": state.active_field.name,
        "overlay": state.overlay,
        "method": state.method.value,
        "url": state.url,
        "in_flight": state.request_in_flight,
    }
