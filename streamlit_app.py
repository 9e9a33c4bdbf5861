"""
Brick Mosaic Planner

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import streamlit as st
from PIL import Image, ImageDraw

from brick_mosaic.board import ColorBoard
from brick_mosaic.catalog import default_catalog, parse_catalog
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import CatalogError, ImageLoadError, UnsolvableError
from brick_mosaic.image_io import load_image, render_board, render_placement
from brick_mosaic.report import build_parts_list, format_cents
from brick_mosaic.solver_exhaustive import solve_exhaustive
from brick_mosaic.solver_greedy import solve_greedy

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Brick Mosaic",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = MosaicConfig()
_EXHAUSTIVE_MAX_PEGS = 12

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }
    .gallery-title {
        font-family: 'Georgia', serif;
        font-size: 2.8rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle {
        font-size: 0.75rem;
        font-weight: 300;
        letter-spacing: 0.04em;
        line-height: 1.8;
        margin-bottom: 2.5rem;
    }
    .label-detail {
        font-family: 'Georgia', serif;
        font-size: 0.85rem;
        font-style: italic;
        color: #a0a09a;
        text-align: center;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _add_passepartout(img: Image.Image, border: int = 20) -> Image.Image:
    w, h = img.size
    bg = (250, 249, 246, 255)
    canvas = Image.new("RGBA", (w + border * 2, h + border * 2), bg)
    canvas.alpha_composite(img.convert("RGBA"), (border, border))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        [border - 1, border - 1, border + w, border + h],
        outline=(224, 222, 216), width=1,
    )
    return canvas


# -- Title -------------------------------------------------------------
st.markdown(
    '<div class="gallery-title">Brick Mosaic Planner</div>',
    unsafe_allow_html=True,
)
st.markdown(
    '<div class="gallery-subtitle">'
    "Upload an image and this app plans how to build it from rectangular "
    "bricks. Every opaque pixel becomes one peg, matched to the nearest "
    "catalog colour; transparent pixels stay empty. The greedy planner then "
    "places one brick at a time, always picking the placement with the best "
    "cost per covered peg, and finishes with a parts list and total price."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2, ctrl3 = st.columns(3)
with ctrl1:
    max_side = st.slider("Max side (pegs)", 4, 64, 24)
    tile_size = st.slider("Preview tile", 4, 24, _DEFAULTS.tile_size)
with ctrl2:
    strategy = st.selectbox("Strategy", ["greedy", "exhaustive"])
    ranking = st.selectbox("Ranking", ["rank", "score"])
with ctrl3:
    color_space = st.selectbox("Colour matching", ["rgb", "lab"])
    dither = st.checkbox("Ordered dithering", value=_DEFAULTS.dither)

catalog_file = st.file_uploader("Brick catalog (optional)", type=["txt"])
catalog = default_catalog()
if catalog_file is not None:
    try:
        catalog = parse_catalog(catalog_file.getvalue().decode("utf-8"))
    except (CatalogError, UnicodeDecodeError) as exc:
        st.error(f"Catalog rejected: {exc}")
        st.stop()

st.markdown("---")

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader("Select artwork", type=["png", "bmp", "gif", "webp"])

if uploaded is not None:
    st.session_state.uploaded_data = uploaded.getvalue()
elif "uploaded_data" not in st.session_state:
    st.session_state.uploaded_data = None

if st.session_state.uploaded_data is not None:
    try:
        source = load_image(io.BytesIO(st.session_state.uploaded_data), max_side)
    except ImageLoadError as exc:
        st.error(f"Image rejected: {exc}")
        st.stop()
    h, w = source.shape[:2]

    board = ColorBoard.from_pixels(
        source, catalog.rgb, color_space=color_space, dither=dither,
    )
    board_img = Image.fromarray(render_board(board, catalog))

    too_big = strategy == "exhaustive" and board.colorable_count > _EXHAUSTIVE_MAX_PEGS
    if too_big:
        st.warning(
            f"Exhaustive search is limited to {_EXHAUSTIVE_MAX_PEGS} pegs; "
            f"this board has {board.colorable_count}. Lower the max side or use greedy."
        )

    if st.button("PLAN", type="primary", use_container_width=True, disabled=too_big):
        progress = st.empty()
        progress.markdown(
            '<div class="label-detail">Placing bricks ...</div>',
            unsafe_allow_html=True,
        )

        t0 = time.perf_counter()
        try:
            if strategy == "exhaustive":
                placement = solve_exhaustive(board, catalog.definitions)
            else:
                placement = solve_greedy(board, catalog.definitions, ranking=ranking)
        except UnsolvableError as exc:
            progress.empty()
            st.error(f"No complete plan found: {exc}")
            st.stop()
        elapsed = time.perf_counter() - t0
        progress.empty()

        mosaic = Image.fromarray(render_placement(placement, catalog, tile_size))
        st.image(_add_passepartout(mosaic, border=28), use_container_width=True)

        buf = io.BytesIO()
        mosaic.save(buf, format="PNG")
        _, dl_col, _ = st.columns([1, 2, 1])
        with dl_col:
            st.download_button(
                "SAVE PREVIEW",
                data=buf.getvalue(),
                file_name="brick_mosaic.png",
                mime="image/png",
                use_container_width=True,
            )

        parts = build_parts_list(placement, catalog)
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Board", f"{w} × {h}")
        m2.metric("Bricks", f"{parts.brick_count:,}")
        m3.metric("Cost", format_cents(parts.total_cost))
        m4.metric("Time", f"{elapsed:.1f} s")

        rows = []
        for color_id, name in enumerate(catalog.color_names):
            for definition_id, count in parts.entries(color_id):
                definition = catalog.definitions[definition_id]
                rows.append({
                    "Colour": name,
                    "Part": f"#{definition_id}",
                    "Size": f"{definition.width} x {definition.height}",
                    "Unit cost (c)": definition.cost,
                    "Count": count,
                })
        st.dataframe(rows, use_container_width=True)

    # Inputs
    doc1, doc2 = st.columns(2)
    with doc1:
        st.image(
            Image.fromarray(source).resize((w * tile_size, h * tile_size), Image.NEAREST),
            use_container_width=True,
        )
        st.markdown('<div class="label-detail">Source</div>', unsafe_allow_html=True)
    with doc2:
        st.image(
            board_img.resize((w * tile_size, h * tile_size), Image.NEAREST),
            use_container_width=True,
        )
        st.markdown(
            f'<div class="label-detail">{w} &times; {h}, '
            f"{board.colorable_count} pegs</div>",
            unsafe_allow_html=True,
        )

else:
    st.markdown(
        '<p style="font-family: Georgia, serif; color: #bbb; font-style: italic;">'
        "Select an artwork to begin.</p>",
        unsafe_allow_html=True,
    )
