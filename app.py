"""
Streamlit frontend for Manifest AI Studio (Builders view).

This is the main entry point for the application. It collects a builder form,
asks Gemini for a single-file HTML project, previews it, and optionally saves
it or publishes it to GitHub.

Environment Variables:
- GEMINI_API_KEY or GOOGLE_GENAI_API_KEY: Required for Gemini calls
- GEMINI_TEXT_MODEL / GEMINI_IMAGE_MODEL / GEMINI_CODE_MODEL / VEO_MODEL: (Optional) model overrides
- STUDIO_VIDEO_DIR: (Optional) where downloaded videos are written
- STUDIO_VIDEO_KEEP: (Optional) how many downloaded videos to keep (default 20)
- STUDIO_PROJECTS_PATH: (Optional) JSON file for saved projects
- GITHUB_API_URL: (Optional) GitHub API base URL
"""

import os
import time

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

from studio import (
    BUILDER_TARGETS,
    CATEGORIES,
    GenerationGateway,
    JsonProjectStore,
    ProjectData,
    StudioError,
    build_project_prompt,
    get_logger,
    publish_to_github,
)

logger = get_logger("builders_page")

# Load environment variables from .env file
load_dotenv()

st.set_page_config(
    page_title="Manifest AI Studio",
    page_icon="🏗️",
    layout="wide"
)

st.title("🏗️ Manifest AI Studio")
st.markdown("_Describe a project and get a complete single-file app_")

# ---------- Sidebar: Environment Configuration ----------
with st.sidebar:
    st.markdown("**API Keys & Settings**")
    api_key = st.text_input(
        "Google AI API Key",
        type="password",
        value=os.getenv("GEMINI_API_KEY", ""),
        help="Your API key from Google AI Studio (ai.google.dev)"
    )
    if api_key:
        os.environ["GEMINI_API_KEY"] = api_key
        st.caption("✅ API key set")
    save_projects = st.checkbox("Save generated projects", value=True)

# ---------- Section 1: Project Form ----------
st.header("1️⃣ Describe Your Project")

builder = st.selectbox("Builder", list(BUILDER_TARGETS.keys()))
col_title, col_cat = st.columns(2)
with col_title:
    title = st.text_input("Project Title", placeholder="e.g. Coffee Shop Landing Page")
with col_cat:
    category = st.selectbox("Category", CATEGORIES)
description = st.text_area(
    "Description",
    placeholder="What should it do? Who is it for?",
    height=140,
)

generate = st.button("🚀 Generate Project", type="primary", use_container_width=True)

if generate:
    if not title or not description:
        st.warning("⚠️ Please fill in a title and description first.")
    else:
        project = ProjectData(
            title=title,
            feature=builder,
            category=category,
            description=description,
        )
        with st.status("Generating your project...", expanded=True) as status:
            status.write("✍️ Sending project brief to Gemini...")
            try:
                code = GenerationGateway().generate_code(
                    build_project_prompt(project),
                    BUILDER_TARGETS[builder],
                )
            except StudioError as exc:
                status.update(label="❌ Generation failed", state="error")
                st.error(f"Manifestation failed: {exc}")
                st.stop()
            except Exception as exc:
                logger.exception("Code generation failed")
                status.update(label="❌ Generation failed", state="error")
                st.error(f"Manifestation failed: {exc}")
                st.stop()
            status.update(label="✅ Complete! Your project is ready.", state="complete")

        st.session_state["generated_code"] = code
        if save_projects:
            project.code = code
            JsonProjectStore().save(project)

# ---------- Section 2: Preview ----------
code = st.session_state.get("generated_code")
if code:
    st.header("2️⃣ Preview")
    tab_preview, tab_code = st.tabs(["Preview", "Code"])
    with tab_preview:
        components.html(code, height=700, scrolling=True)
    with tab_code:
        st.code(code, language="html")
    st.download_button(
        "⬇️ Download HTML",
        data=code,
        file_name=f"smart-agent-project-{int(time.time() * 1000)}.html",
        mime="text/html",
    )

    # ---------- Section 3: Publish ----------
    st.header("3️⃣ Publish to GitHub")
    col_token, col_repo = st.columns(2)
    with col_token:
        github_token = st.text_input("GitHub Token", type="password")
    with col_repo:
        repo_name = st.text_input("Repository Name")
    if st.button("📤 Push to GitHub"):
        if not github_token or not repo_name:
            st.warning("⚠️ GitHub Token and Repo Name are required.")
        else:
            with st.spinner("Publishing..."):
                try:
                    result = publish_to_github(github_token, repo_name, code)
                except StudioError as exc:
                    st.error(f"GitHub Manifestation Failed: {exc}")
                except Exception as exc:
                    logger.exception("GitHub publish failed")
                    st.error(f"GitHub Manifestation Failed: {exc}")
                else:
                    st.success(f"Success! Project manifested at: {result.repository_url}")

st.caption("Built with Streamlit + Google Gemini AI.")
