"""
Diamond Assortment Console - Main Entry Point
Simple login and navigation hub
"""
import streamlit as st
from utils.auth import AuthManager
from utils.config import config
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title="Diamond Assortment Console",
    page_icon="💎",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Initialize auth manager
auth = AuthManager()

# ==================== CUSTOM STYLES ====================

st.markdown("""
<style>
    .module-card {
        background: linear-gradient(135deg, #0f766e 0%, #14b8a6 100%);
        border-radius: 12px;
        padding: 25px;
        color: white;
        text-align: center;
    }
</style>
""", unsafe_allow_html=True)


# ==================== LOGIN PAGE ====================

def show_login_page():
    """Display simple login form"""

    col1, col2, col3 = st.columns([1, 1.5, 1])

    with col2:
        st.markdown("")
        st.markdown("")

        st.markdown("""
        <div style="text-align: center; margin-bottom: 30px;">
            <div style="font-size: 4rem;">💎</div>
            <h1 style="margin: 10px 0 5px 0; color: #1f2937;">Diamond Assortment</h1>
            <p style="color: #6b7280; margin: 0;">GRN → Packet Allocation Console</p>
        </div>
        """, unsafe_allow_html=True)

        with st.form("login_form", clear_on_submit=False):
            email = st.text_input(
                "Email",
                placeholder="Enter your email",
                key="login_email"
            )

            password = st.text_input(
                "Password",
                type="password",
                placeholder="Enter your password",
                key="login_password"
            )

            st.markdown("")
            submit = st.form_submit_button("Login", type="primary", use_container_width=True)

            if submit:
                if email and password:
                    success, result = auth.authenticate(email, password)

                    if success:
                        auth.login(result)
                        st.success("✅ Login successful!")
                        st.rerun()
                    else:
                        error_msg = result.get("error", "Invalid email or password")
                        st.error(f"❌ {error_msg}")
                else:
                    st.warning("⚠️ Please enter email and password")

        st.markdown("---")
        st.caption(
            f"v1.0.0 | "
            f"{'☁️ Cloud' if config.is_cloud else '💻 Local'} | "
            f"API: {config.get_api_config()['base_url']}"
        )


# ==================== GREETING PAGE ====================

def show_greeting_page():
    """Display welcome page with module navigation"""

    user = st.session_state.get('user', {})
    display_name = auth.get_user_display_name()
    role = user.get('role', 'user')

    # Sidebar - User info & Logout
    with st.sidebar:
        st.markdown(f"### 👤 {display_name}")
        st.caption(f"Role: {role}")
        st.markdown("---")

        if st.button("🚪 Logout", use_container_width=True):
            auth.logout()
            st.rerun()

    st.title(f"👋 Welcome, {display_name}!")
    st.caption("Select a module to get started")

    col1, col2, col3 = st.columns([1, 1, 1])

    with col2:
        st.markdown("""
        <div class="module-card">
            <h3>💎 Packet Assortment</h3>
            <p>Split GRN carats into diamond packets</p>
        </div>
        """, unsafe_allow_html=True)

        if st.button("Open Packet Assortment", key="btn_assortment", use_container_width=True):
            st.switch_page("pages/1_💎_Packet_Assortment.py")

    st.markdown("")
    st.caption("💡 Tip: Use sidebar navigation or click the module card above")


# ==================== MAIN ====================

def main():
    """Main entry point"""
    if auth.check_session():
        show_greeting_page()
    else:
        show_login_page()


if __name__ == "__main__":
    main()
