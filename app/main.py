import sys
import os
import streamlit as st

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from catalog.config import get_settings, setup_logging
from catalog.domain import FilterQuery, SortKey
from catalog.exceptions import CatalogError
from catalog.service import CatalogService


# ============ Кэширование данных ============
@st.cache_resource
def get_service():
    settings = get_settings()
    setup_logging(settings)
    return CatalogService.from_settings(settings)


def format_price(price: float) -> str:
    return f"CI$ {price:,.2f}"


SORT_LABELS = {
    SortKey.DEFAULT: "По умолчанию",
    SortKey.PRICE_LOW: "Цена: по возрастанию",
    SortKey.PRICE_HIGH: "Цена: по убыванию",
    SortKey.NAME: "Название",
    SortKey.RATING: "Рейтинг",
}


# ============ Инициализация ============
st.set_page_config(page_title="Mall of Cayman", page_icon="🛍️", layout="wide")

settings = get_settings()
try:
    service = get_service()
except CatalogError as e:
    st.error(f"❌ {e.message}")
    st.stop()

# категория из ссылки ?category=Phones
if "category" not in st.session_state:
    st.session_state.category = st.query_params.get("category", "")
if "page" not in st.session_state:
    st.session_state.page = 1


def reset_page():
    st.session_state.page = 1


def select_category(name: str):
    st.session_state.category = name
    st.session_state.page = 1
    if name:
        st.query_params["category"] = name
    else:
        st.query_params.clear()


# ============ SIDEBAR - дерево категорий ============
with st.sidebar:
    st.header("📂 Категории")
    counts = service.category_counts()

    st.button(
        "Все категории",
        key="cat_all",
        on_click=select_category,
        args=("",),
        type="primary" if not st.session_state.category else "secondary",
    )
    for cat, depth in service.category_tree():
        if cat.name is None:
            continue
        marker = "▸ " if service.has_subcategories(cat.id) else ""
        label = f"{'　' * depth}{marker}{cat.name} ({counts.get(cat.id, 0)})"
        st.button(
            label,
            key=f"cat_{cat.id}",
            on_click=select_category,
            args=(cat.name,),
            type="primary" if st.session_state.category == cat.name else "secondary",
        )

    st.divider()
    only_selected = st.checkbox(
        "Без подкатегорий", value=False, on_change=reset_page
    )
    page_size = st.selectbox(
        "Товаров на странице",
        sorted({settings.default_page_size, 24, 48}),
        on_change=reset_page,
    )


# ============ Фильтры ============
st.title("🛍️ Mall of Cayman")
st.caption(f"📂 {st.session_state.category or 'Все категории'}")

# подкатегории выбранной категории, как радио на витрине
children = service.subcategories(st.session_state.category)
if children:
    child_cols = st.columns(min(len(children), 6))
    for i, child in enumerate(children):
        with child_cols[i % len(child_cols)]:
            st.button(
                child.name or child.id,
                key=f"sub_{child.id}",
                on_click=select_category,
                args=(child.name,),
                disabled=child.name is None,
            )

col1, col2, col3 = st.columns([3, 3, 2])
with col1:
    search = st.text_input(
        "🔍 Поиск", placeholder="Название или описание", on_change=reset_page
    )
with col2:
    price_range = st.slider(
        "💰 Цена", 0, settings.price_ceiling, (0, settings.price_ceiling),
        step=50,
        on_change=reset_page,
    )
with col3:
    sort = st.selectbox(
        "↕️ Сортировка", list(SORT_LABELS),
        format_func=SORT_LABELS.get,
        on_change=reset_page,
    )

query = FilterQuery(
    category=st.session_state.category,
    search=search.strip(),
    min_price=price_range[0],
    max_price=price_range[1],
    sort=sort,
    include_descendants=not only_selected,
    page=st.session_state.page,
    page_size=settings.clamp_page_size(page_size),
)
# фильтры могли сузить выдачу: номер страницы не выходит за последнюю
page = service.browse(query, clamp_page=True)
st.session_state.page = page.page

st.info(f"🔍 Найдено товаров: **{page.total}**")
st.divider()

# ============ Товары ============
if not page.items:
    st.warning("Товары не найдены. Попробуйте изменить фильтры.")
else:
    for p in page.items:
        with st.container():
            cols = st.columns([5, 2, 1])
            with cols[0]:
                st.markdown(f"**{p.name}**")
                st.caption(p.description)
            with cols[1]:
                if p.discount_price:
                    st.write(f"~~{format_price(p.original_price)}~~ {format_price(p.price)}")
                else:
                    st.write(format_price(p.price))
            with cols[2]:
                st.write(f"⭐ {p.ratings:.1f}")
            st.divider()

# ============ Пагинация ============
if page.pages > 1:
    prev_col, info_col, next_col = st.columns([1, 2, 1])
    with prev_col:
        if st.button("⬅️ Назад", disabled=not page.has_prev):
            st.session_state.page -= 1
            st.rerun()
    with info_col:
        st.write(f"Страница {page.page} из {page.pages}")
    with next_col:
        if st.button("Вперёд ➡️", disabled=not page.has_next):
            st.session_state.page += 1
            st.rerun()
