import sys
from pathlib import Path

import streamlit as st

try:
    from core.settings import SETTINGS
    from streamlit_ui.client import SESSION_PARAM, ChatApiClient, session_id_from_params
except ModuleNotFoundError:
    ROOT = Path(__file__).resolve().parents[1]
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))
    from core.settings import SETTINGS
    from streamlit_ui.client import SESSION_PARAM, ChatApiClient, session_id_from_params

WELCOME = (
    "Hi! I'm the TechStore support assistant. Ask me about shipping, returns, "
    "payments or your order."
)

st.set_page_config(page_title="TechStore Support", layout="centered")
st.title("TechStore Support Chat")

client = ChatApiClient(
    SETTINGS.UI.API_BASE_URL,
    message_endpoint=SETTINGS.UI.ENDPOINT_CHAT_MESSAGE,
    history_endpoint=SETTINGS.UI.ENDPOINT_CHAT_HISTORY,
)
max_length = SETTINGS.CHAT.MAX_MESSAGE_LENGTH

# The session id lives only on the client side, in the page URL
if "session_id" not in st.session_state:
    st.session_state.session_id = session_id_from_params(st.query_params)
if "messages" not in st.session_state:
    st.session_state.messages = client.restore_messages(st.session_state.session_id)

with st.sidebar:
    st.subheader("Session")
    st.text(f"API_BASE_URL = {SETTINGS.UI.API_BASE_URL}")
    st.text(f"sessionId = {st.session_state.session_id or '(new)'}")
    if st.button("New Chat"):
        st.session_state.session_id = None
        st.session_state.messages = []
        st.query_params.pop(SESSION_PARAM, None)

with st.chat_message("assistant"):
    st.markdown(WELCOME)

for msg in st.session_state.messages:
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])

if prompt := st.chat_input("Type your message..."):
    prompt = prompt.strip()
    if len(prompt) > max_length:
        st.error(f"Message is too long. Please keep it under {max_length} characters.")
    elif prompt:
        st.session_state.messages.append({"role": "user", "content": prompt})
        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            with st.spinner("Typing..."):
                result = client.send_message(prompt, st.session_state.session_id)
            if result.is_error:
                st.error(result.text)
            else:
                st.markdown(result.text)
                st.session_state.session_id = result.session_id
                st.query_params[SESSION_PARAM] = result.session_id
                st.session_state.messages.append({"role": "assistant", "content": result.text})
