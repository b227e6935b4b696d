"""Tests for the overlay and fresh export layouts."""

import copy

from tourpage_copywriter.tabular_reader import read_content_tree
from tourpage_copywriter.tabular_writer import (
    SEO_HEADER,
    STRUCTURED_DATA_HEADER,
    fresh_header,
    position_code,
    write_fresh,
    write_overlay,
)


def _rows_for(rows, section):
    """Field rows (with an item code) whose column 0 is the given label."""
    return [row for row in rows if row and row[0] == section and len(row) > 1 and row[1]]


def _all_cells_are_text(rows):
    for row in rows:
        for value in row:
            assert isinstance(value, str)
            assert value not in ("None", "null", "undefined")


JUNK_TREE = {
    "hero": None,
    "about": "not an object",
    "products": [None, {"title": None, "shortDescription": 3}],
    "solutions": [None, {"badge": ["x"]}],
    "seo": {
        "primaryKeywords": "not a list",
        "keywordDensity": [{"keyword": None}, "junk"],
        "competitorAnalysis": None,
        "contentOptimization": {"titleLength": None},
    },
    "structuredData": {"organization": None, "products": "x", "website": {"url": None}},
}


class TestOverlayWriter:
    """Tests for write_overlay."""

    def test_header_row_relabelled(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en")

        assert rows[0][4] == "客戶原文 (Original)"
        assert rows[0][5] == "AI 生成文案 (English (通用))"
        assert rows[0][6] == "中文翻譯 (Chinese Translation)"

    def test_header_row_chinese_target(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "zh-TW")

        assert rows[0][4] == "客戶原文 (Original)"
        assert rows[0][5] == "AI 生成文案 (繁體中文 (台灣))"
        assert len(rows[0]) == 6

    def test_explicit_language_name(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en", language_name="English")

        assert rows[0][5] == "AI 生成文案 (English)"

    def test_generated_copy_beside_original(self, template_rows, generated_tree):
        """Test that columns 5/6 receive copy and translation for mapped rows."""
        rows = write_overlay(template_rows, generated_tree, "en")

        hero_title = rows[3]
        assert hero_title[4] == "歡迎來到台灣"
        assert hero_title[5] == "Welcome to Taiwan"
        assert hero_title[6] == "歡迎來到台灣"

        contact_title = rows[17]
        assert contact_title[5] == "Get in touch"
        assert contact_title[6] == "聯絡我們"

    def test_untranslated_field_has_no_translation_cell(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en")

        cta_link = rows[5]
        assert cta_link[5] == "https://example.com/book"
        assert len(cta_link) == 6

    def test_product_blocks_in_order(self, template_rows, generated_tree):
        """Test that the Nth carousel block receives products[N]."""
        rows = write_overlay(template_rows, generated_tree, "en")

        assert rows[12][5] == "Ten-day island loop"
        assert rows[12][6] == "環島十日"
        assert rows[13][5] == "The classic route"
        assert rows[15][5] == "East coast in three days"
        assert rows[15][6] == "花東三日"

    def test_two_products_english_and_chinese(self, generated_tree):
        """Test block groups for two products, with and without the translation column."""
        template = []
        for _ in range(2):
            template.append(["carousel", "", "", "", ""])
            for code in ("A", "B", "C"):
                template.append(["carousel", code, "", "", "original"])
            template.append(["", "", "", "", ""])
        tree = {"products": generated_tree["products"]}

        english = write_overlay(template, tree, "en")
        chinese = write_overlay(template, tree, "zh-TW")

        assert len(english) == len(template)
        assert [row[5] for row in english[1:4]] == [
            "Ten-day island loop", "The classic route", "Ten days along the coast",
        ]
        assert [row[5] for row in english[6:9]] == [
            "East coast in three days", "Hualien and Taitung", "Three days on the east coast",
        ]
        assert [row[6] for row in english[6:9]] == ["花東三日", "花蓮與台東", "東海岸三天"]
        assert all(len(row) <= 6 for row in chinese)
        assert chinese[1][5] == "Ten-day island loop"

    def test_product_groups_tagged_on_every_row(self, generated_tree):
        """Test that each tagged A/B/C group gets its own product."""
        template = []
        for _ in range(2):
            for code in ("A", "B", "C"):
                template.append(["carousel", code, "", "", "original"])
            template.append(["", "", "", "", ""])
        tree = {"products": generated_tree["products"]}

        rows = write_overlay(template, tree, "en")

        assert [row[5] for row in rows[0:3]] == [
            "Ten-day island loop", "The classic route", "Ten days along the coast",
        ]
        assert [row[5] for row in rows[4:7]] == [
            "East coast in three days", "Hualien and Taitung", "Three days on the east coast",
        ]
        assert rows[3] == ["", "", "", "", ""]

    def test_chinese_target_never_writes_column_six(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "zh-CN")

        assert all(len(row) <= 6 for row in rows)

    def test_unmapped_rows_pass_through(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en")

        assert rows[2] == ["Hero", "", "", "", ""]
        assert rows[10] == ["About Us", "E", "未使用欄位", "", "ignored"]

    def test_extra_product_block_passes_through(self, template_rows, generated_tree):
        """Test that a template block with no generated counterpart is untouched."""
        template_rows += [["carousel", "", "", "產品 3", ""], ["carousel", "A", "產品標題", "", "太魯閣"]]

        rows = write_overlay(template_rows, generated_tree, "en")

        assert rows[19] == ["carousel", "A", "產品標題", "", "太魯閣"]

    def test_missing_section_renders_empty(self, template_rows, generated_tree):
        del generated_tree["contact"]

        rows = write_overlay(template_rows, generated_tree, "en")

        assert rows[17][5] == ""
        assert rows[17][6] == ""

    def test_original_rows_not_mutated(self, template_rows, generated_tree):
        snapshot = copy.deepcopy(template_rows)

        write_overlay(template_rows, generated_tree, "en")

        assert template_rows == snapshot

    def test_nothing_appended_for_website_sections_only(self, template_rows, generated_tree):
        tree = {key: generated_tree[key] for key in ("hero", "about", "products", "contact")}

        rows = write_overlay(template_rows, tree, "en")

        assert len(rows) == len(template_rows)

    def test_solutions_appended(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en")
        appended = rows[len(template_rows):]

        assert appended[0] == [""] * 6
        assert appended[1][0] == "Solution"
        assert appended[2] == ["Solution", "", "方案 1", "", "", ""]
        assert appended[3] == ["Solution", "A", "標籤", "", "Groups", "團體"]
        assert appended[4] == ["Solution", "B", "標題", "", "Company outings", "企業旅遊"]
        assert appended[5][1] == "C"
        assert appended[6] == [""] * 6

    def test_seo_blocks_appended(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "en")

        assert [SEO_HEADER, "", "", "", "", ""] in rows
        meta = _rows_for(rows, "SEO Meta Tags")
        assert [row[1] for row in meta] == ["A", "B", "C"]
        assert meta[0][4:] == ["Guided cycling tours around Taiwan", "台灣單車導覽行程"]
        keywords = _rows_for(rows, "關鍵字策略")
        assert keywords[0][4:] == ["taiwan cycling, bike tour", "台灣單車, 自行車旅遊"]
        assert [row[1] for row in _rows_for(rows, "競爭分析")] == ["A", "B", "C"]
        assert _rows_for(rows, "USP差異化分析")[0][4] == "Local guides | Support van"
        assert _rows_for(rows, "內容優化建議")[2][4] == "Add calls to action"

    def test_structured_data_without_products(self, template_rows, generated_tree):
        """Test that the overlay omits product descriptors."""
        rows = write_overlay(template_rows, generated_tree, "en")

        assert [STRUCTURED_DATA_HEADER, "", "", "", "", ""] in rows
        organization = _rows_for(rows, "組織資訊")
        assert [row[1] for row in organization] == ["A", "B", "C", "D"]
        assert organization[1][4] == "Island Rides"
        assert [row[1] for row in _rows_for(rows, "網站資訊")] == ["A", "B", "C", "D"]
        assert not any(row and row[0] == "產品 1" for row in rows)

    def test_chinese_target_appended_rows_have_no_translation(self, template_rows, generated_tree):
        rows = write_overlay(template_rows, generated_tree, "zh-TW")

        assert ["Solution", "A", "標籤", "", "Groups"] in rows

    def test_fail_soft_on_malformed_tree(self, template_rows):
        rows = write_overlay(template_rows, copy.deepcopy(JUNK_TREE), "en")

        _all_cells_are_text(rows)
        assert rows[3][5] == ""
        # products[0] is not an object, so the first block passes through
        assert rows[12] == ["carousel", "A", "產品標題", "", "環島十日"]
        assert rows[15][5] == ""

    def test_none_cells_become_empty(self, generated_tree):
        rows = write_overlay([["Hero", "A", None, None, "Hi"]], generated_tree, "en")

        assert rows[0][:5] == ["Hero", "A", "", "", "Hi"]


class TestFreshWriter:
    """Tests for write_fresh."""

    def test_header_english(self):
        assert fresh_header("en") == [
            "區塊名稱", "項目代碼", "項目說明", "備註", "AI 生成文案 (English (通用))", "中文翻譯",
        ]

    def test_header_chinese(self):
        header = fresh_header("zh-TW")

        assert len(header) == 5
        assert "中文翻譯" not in header

    def test_header_unknown_language_code(self):
        assert fresh_header("pt-BR")[4] == "AI 生成文案 (pt-BR)"

    def test_first_row_is_header(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        assert rows[0] == fresh_header("en")

    def test_hero_rows(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        hero = _rows_for(rows, "Hero")
        assert hero[0] == ["Hero", "A", "主標題", "", "Welcome to Taiwan", "歡迎來到台灣"]
        assert hero[3] == ["Hero", "D", "CTA 連結", "", "https://example.com/book"]

    def test_product_block_groups(self, generated_tree):
        """Test one labelled group per product with A/B/C rows and a blank separator."""
        rows = write_fresh(generated_tree, "en")

        starts = [i for i, row in enumerate(rows) if row[0] == "carousel" and row[1] == ""]
        assert len(starts) == 2
        for number, start in enumerate(starts):
            assert rows[start][3] == f"產品 {number + 1}"
            assert [row[1] for row in rows[start + 1:start + 4]] == ["A", "B", "C"]
            assert all(cell == "" for cell in rows[start + 4])
        assert rows[starts[0] + 1][4] == "Ten-day island loop"
        assert rows[starts[1] + 1][4] == "East coast in three days"

    def test_section_order(self, generated_tree):
        rows = write_fresh(generated_tree, "en")
        labels = [row[0] for row in rows if row[0] and row[1] == "" and row[3] == ""]

        order = ["Hero", "About Us", "Solution", "Contact Us", SEO_HEADER, STRUCTURED_DATA_HEADER]
        positions = [labels.index(label) for label in order]
        assert positions == sorted(positions)

    def test_keyword_density_codes_follow_position(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        density = _rows_for(rows, "關鍵字密度分析")
        assert [row[1] for row in density] == ["A", "B"]
        assert density[0] == ["關鍵字密度分析", "A", "taiwan cycling (3.2%)", "", "Keep", "Keep"]
        assert density[1][2] == "bike tour (2%)"

    def test_keyword_density_codes_past_z(self):
        """Test that codes continue spreadsheet-style after Z."""
        densities = [{"keyword": f"kw{i}", "density": 1, "recommendation": "ok"} for i in range(28)]

        rows = write_fresh({"seo": {"keywordDensity": densities}}, "en")

        codes = [row[1] for row in _rows_for(rows, "關鍵字密度分析")]
        assert codes[24:] == ["Y", "Z", "AA", "AB"]

    def test_position_code(self):
        assert position_code(0) == "A"
        assert position_code(25) == "Z"
        assert position_code(26) == "AA"
        assert position_code(51) == "AZ"
        assert position_code(52) == "BA"
        assert position_code(701) == "ZZ"
        assert position_code(702) == "AAA"

    def test_keyword_density_chinese_target(self, generated_tree):
        rows = write_fresh(generated_tree, "zh-TW")

        density = _rows_for(rows, "關鍵字密度分析")
        assert density[0] == ["關鍵字密度分析", "A", "taiwan cycling (3.2%)", "", "Keep"]

    def test_seo_blocks(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        assert [row[1] for row in _rows_for(rows, "SEO Meta Tags")] == ["A", "B", "C", "D"]
        structure = _rows_for(rows, "SEO 內容結構")
        assert structure[0][4] == "Why cycle Taiwan | Our routes"
        assert [row[1] for row in _rows_for(rows, "競爭分析")] == ["A", "B", "C", "D"]
        assert _rows_for(rows, "競爭分析")[1][4] == "taiwan tours"
        assert _rows_for(rows, "USP差異化分析")[2][4] == "Taiwan's friendliest rides"
        optimization = _rows_for(rows, "內容優化建議")
        assert optimization[0][2] == "標題長度 (目前: 45)"
        assert optimization[1][2] == "描述長度 (目前: 120)"
        assert optimization[2][2] == "可讀性評分 (85)"

    def test_structured_data_includes_products(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        organization = _rows_for(rows, "組織資訊")
        assert [row[1] for row in organization] == ["A", "B", "C", "D", "E", "F"]
        assert organization[4][4] == "+886-2-1234-5678"
        product = _rows_for(rows, "產品 1")
        assert [row[1] for row in product] == ["A", "B", "C", "D", "E"]
        assert [row[4] for row in product] == [
            "Product", "Ten-day island loop", "Classic route", "Island Rides", "Tour",
        ]

    def test_chinese_target_has_no_translation_column(self, generated_tree):
        rows = write_fresh(generated_tree, "zh-TW")

        assert all(len(row) <= 5 for row in rows)

    def test_empty_tree_renders_website_sections(self):
        rows = write_fresh({}, "en")

        _all_cells_are_text(rows)
        assert _rows_for(rows, "Hero")[0][4] == ""
        assert not any(row[0] == SEO_HEADER for row in rows)

    def test_fail_soft_on_malformed_tree(self):
        rows = write_fresh(copy.deepcopy(JUNK_TREE), "en")

        _all_cells_are_text(rows)
        products = _rows_for(rows, "carousel")
        assert len(products) == 6
        assert products[4][4] == "3"
        assert _rows_for(rows, "內容優化建議")[0][2] == "標題長度 (目前: 0)"


class TestRoundTrip:
    """Fresh export rows read back into the website sections they came from."""

    @staticmethod
    def _website_sections(tree):
        expected = {}
        for key in ("hero", "about", "contact"):
            expected[key] = {k: v for k, v in tree[key].items() if not k.endswith("_zh")}
        expected["products"] = [
            {k: v for k, v in block.items() if not k.endswith("_zh")}
            for block in tree["products"]
        ]
        return expected

    def test_round_trip_english(self, generated_tree):
        rows = write_fresh(generated_tree, "en")

        assert read_content_tree(rows) == self._website_sections(generated_tree)

    def test_round_trip_chinese(self, generated_tree):
        rows = write_fresh(generated_tree, "zh-TW")

        assert read_content_tree(rows) == self._website_sections(generated_tree)

    def test_round_trip_partial_tree(self):
        tree = {"about": {"title": "About", "image": "https://example.com/a.png"}}

        assert read_content_tree(write_fresh(tree, "en")) == tree
