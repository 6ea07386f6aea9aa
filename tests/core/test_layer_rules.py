"""Category/View Rule Engine: gating, contextual remaps, and stacking order.

Tests cover:
    - gloves and jackets remaps
    - patch handling per view and softshell context
    - left/right category gating
    - normalize_all ordering and dropping of unordered categories
"""

from sandwich.core.domain_types import View
from sandwich.core.layer_params import LayerParam, parse_params
from sandwich.core.layer_rules import (
    LayerNormalizer, detect_softshell_jacket, normalize_layers,
)


def _categories(view: View, params: str) -> list[str]:
    return [p.category for p in normalize_layers(view, parse_params(params))]


# ─── gloves / jackets ────────────────────────────────────────────

def test_ski_gloves_go_on_top():
    params = [LayerParam.of("gloves", "ski-black")]
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "gloves-top"


def test_regular_gloves_go_on_bottom():
    params = [LayerParam.of("gloves", "regular-gloves-black")]
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "gloves-bottom"


def test_ski_must_be_a_prefix():
    params = [LayerParam.of("gloves", "leather-ski-black")]
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "gloves-bottom"


def test_greenland_jacket_is_outer():
    params = [LayerParam.of("jackets", "greenland-black")]
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "outer-jackets"


def test_softshell_jacket_stays_jacket():
    params = [LayerParam.of("jackets", "softshell-grey")]
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "jackets"


def test_remap_keeps_normalized_sku():
    params = [LayerParam.of("jackets", "Greenland-Black-XL")]
    normalized = normalize_layers(View.FRONT, params)
    assert normalized[0].token == "outer-jackets/greenland-black"


# ─── patches ─────────────────────────────────────────────────────

def test_patches_dropped_on_back_view():
    params = [LayerParam.of("patches-left", "flag-patch-red")]
    normalizer = LayerNormalizer.build(View.BACK, params)
    assert normalizer.normalize(params[0]) is None


def test_patches_with_softshell_on_front():
    params = parse_params("jackets/softshell-grey,patches-left/flag-patch-red")
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize(params[0]).category == "jackets"
    assert normalizer.normalize(params[1]).category == "softshell-patches-left"


def test_softshell_back_view_keeps_jacket_drops_patch():
    assert _categories(
        View.BACK, "jackets/softshell-grey,patches-left/flag-patch-red",
    ) == ["jackets"]


def test_patches_without_softshell_on_front():
    assert _categories(
        View.FRONT, "patches-right/canadaflag-red,hoodies/baerskin4-black",
    ) == ["hoodies", "patches-right"]


def test_patches_on_left_view_match_side_only():
    params = parse_params("patches-left/flag-patch-red,patches-right/canadaflag-red")
    normalizer = LayerNormalizer.build(View.LEFT, params)
    assert normalizer.normalize(params[0]).category == "patches"
    assert normalizer.normalize(params[1]) is None


def test_patches_on_right_view_match_side_only():
    params = parse_params("patches-left/flag-patch-red,patches-right/canadaflag-red")
    normalizer = LayerNormalizer.build(View.RIGHT, params)
    assert normalizer.normalize(params[0]) is None
    assert normalizer.normalize(params[1]).category == "patches"


def test_side_view_uses_bare_patch_folder():
    assert _categories(
        View.SIDE, "jackets/softshell-grey,patches-right/canadaflag-red",
    ) == ["jackets", "softshell-patches"]


def test_softshell_context_sees_unfiltered_set():
    # the jacket is gated out on left view only after context detection
    params = parse_params("jackets/softshell-grey,patches-left/flag-patch-red")
    normalizer = LayerNormalizer.build(View.LEFT, params)
    assert normalizer.has_softshell_jacket
    assert normalizer.normalize(params[1]).category == "softshell-patches"


def test_detect_softshell_requires_jackets_category():
    assert not detect_softshell_jacket(parse_params("hoodies/softshell-grey"))
    assert detect_softshell_jacket(parse_params("jackets/softshell-grey-xl"))


# ─── view gating ─────────────────────────────────────────────────

def test_left_view_filters_categories():
    assert _categories(
        View.LEFT,
        "pants/cargo-black,hoodies/baerskin4-black,jackets/softshell-grey,hats/beanie-black",
    ) == ["hoodies", "jackets"]


def test_right_view_filters_gloves():
    assert _categories(View.RIGHT, "gloves/ski-black,hoodies/h-black") == ["hoodies"]


def test_front_view_passes_everything_known():
    assert _categories(
        View.FRONT, "tops/tee-white,pants/cargo-black,hats/beanie-black",
    ) == ["pants", "tops", "hats"]


# ─── normalize_all ───────────────────────────────────────────────

def test_layer_ordering():
    params = parse_params("hats/beanie-black,hoodies/hoodie-black,pants/cargo-darkgreen")
    normalized = LayerNormalizer.build(View.FRONT, params).normalize_all(params)
    assert [p.category for p in normalized] == ["pants", "hoodies", "hats"]


def test_pants_before_hoodies():
    normalized = normalize_layers(
        View.FRONT, parse_params("hoodies/hoodie-black,pants/cargo-darkgreen"),
    )
    assert [p.token for p in normalized] == [
        "pants/cargo-darkgreen", "hoodies/hoodie-black",
    ]


def test_full_outfit_order():
    assert _categories(
        View.FRONT,
        "patches-left/flag-patch-red,jackets/greenland-grey,gloves/ski-black,"
        "hats/beanie-black,jackets/softshell-grey,gloves/regular-black,"
        "hoodies/baerskin4-black,pants/cargo-black",
    ) == [
        "pants", "hoodies", "gloves-bottom", "jackets", "gloves-top",
        "outer-jackets", "hats", "softshell-patches-left",
    ]


def test_unordered_categories_are_dropped():
    assert _categories(View.FRONT, "shoes/boot-black,hoodies/h-black") == ["hoodies"]


def test_equal_orders_keep_input_order():
    normalized = normalize_layers(
        View.FRONT, parse_params("hoodies/b-black,hoodies/a-black"),
    )
    assert [p.sku.value for p in normalized] == ["b-black", "a-black"]


def test_normalizer_is_reusable_and_stateless():
    params = parse_params("gloves/ski-black,pants/cargo-black")
    normalizer = LayerNormalizer.build(View.FRONT, params)
    assert normalizer.normalize_all(params) == normalizer.normalize_all(params)
