"""
피코 커머스 백오피스
====================
메뉴판 기반 브랜드별 주문서 분리 + 개별주문 + 주문 KPI
실행: streamlit run dashboard.py
"""
import sys
import logging
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# 프로젝트 루트를 path에 추가
ROOT = Path(__file__).parent
sys.path.insert(0, str(ROOT))

load_dotenv(ROOT / ".env")

from app.config import settings
from app.pages import individual_order, kpi_dashboard, order_separator

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
)
logger = logging.getLogger(__name__)

# ─── 페이지 설정 ───
st.set_page_config(page_title="피코 커머스", page_icon="📦", layout="wide")

PAGES = {
    "대시보드": kpi_dashboard,
    "주문서 분리": order_separator,
    "개별주문": individual_order,
}

# ─── 사이드바 ───
st.sidebar.title("📦 피코 커머스")
st.sidebar.divider()
page = st.sidebar.radio("메뉴", list(PAGES))

PAGES[page].render()
