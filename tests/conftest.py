"""
Pytest fixtures and configuration for TourPage Copywriter tests.
"""

import copy
import json
from pathlib import Path

import pytest

from tourpage_copywriter.csv_io import encode_csv
from tourpage_copywriter.model_client import ModelClient


TEMPLATE_ROWS = [
    ["區塊名稱", "項目代碼", "項目說明", "備註", "客戶填寫內容"],
    ["", "", "", "", ""],
    ["Hero", "", "", "", ""],
    ["Hero", "A", "主標題", "", "歡迎來到台灣"],
    ["Hero", "B", "副標題描述", "", "  單車環島之旅  "],
    ["", "D", "CTA 連結", "", "https://example.com/book"],
    ["", "", "", "", ""],
    ["About Us", "", "", "", ""],
    ["About Us", "A", "標籤", "", "關於我們"],
    ["About Us", "C", "描述內容", "", "十年帶團經驗"],
    ["About Us", "E", "未使用欄位", "", "ignored"],
    ["carousel", "", "", "產品 1", ""],
    ["carousel", "A", "產品標題", "", "環島十日"],
    ["carousel", "B", "簡短描述", "", "經典路線"],
    ["carousel", "", "", "產品 2", ""],
    ["carousel", "A", "產品標題", "", "花東三日"],
    ["Contact Us", "", "", "", ""],
    ["Contact Us", "B", "標題", "", "聯絡我們"],
]


GENERATED_TREE = {
    "hero": {
        "title": "Welcome to Taiwan",
        "description": "Cycle around the island",
        "ctaButtonText": "Book now",
        "ctaButtonLink": "https://example.com/book",
        "title_zh": "歡迎來到台灣",
        "description_zh": "單車環島之旅",
        "ctaButtonText_zh": "立即預訂",
    },
    "about": {
        "badge": "About us",
        "title": "Local guides",
        "description": "Ten years of guided tours",
        "image": "https://example.com/team.jpg",
        "badge_zh": "關於我們",
        "title_zh": "在地導遊",
        "description_zh": "十年帶團經驗",
    },
    "solutions": [
        {
            "badge": "Groups",
            "title": "Company outings",
            "description": "Tailored team rides",
            "badge_zh": "團體",
            "title_zh": "企業旅遊",
            "description_zh": "量身打造的團隊騎行",
        },
    ],
    "products": [
        {
            "title": "Ten-day island loop",
            "shortDescription": "The classic route",
            "completeDescription": "Ten days along the coast",
            "title_zh": "環島十日",
            "shortDescription_zh": "經典路線",
            "completeDescription_zh": "沿著海岸線的十天",
        },
        {
            "title": "East coast in three days",
            "shortDescription": "Hualien and Taitung",
            "completeDescription": "Three days on the east coast",
            "title_zh": "花東三日",
            "shortDescription_zh": "花蓮與台東",
            "completeDescription_zh": "東海岸三天",
        },
    ],
    "contact": {
        "badge": "Contact",
        "title": "Get in touch",
        "description": "We reply within a day",
        "badge_zh": "聯絡",
        "title_zh": "聯絡我們",
        "description_zh": "一天內回覆",
    },
    "seo": {
        "metaDescription": "Guided cycling tours around Taiwan",
        "metaDescription_zh": "台灣單車導覽行程",
        "metaKeywords": "taiwan cycling,bike tour",
        "ogTitle": "Cycle Taiwan",
        "ogDescription": "Ride the island",
        "h2Suggestions": ["Why cycle Taiwan", "Our routes"],
        "h3Suggestions": ["East coast"],
        "primaryKeywords": ["taiwan cycling", "bike tour"],
        "primaryKeywords_zh": ["台灣單車", "自行車旅遊"],
        "longTailKeywords": ["guided bike tour taiwan"],
        "keywordDensity": [
            {"keyword": "taiwan cycling", "density": 3.2, "recommendation": "Keep"},
            {"keyword": "bike tour", "density": 2.0, "recommendation": "Add more"},
        ],
        "competitorAnalysis": {
            "industry": "Travel",
            "competitorKeywords": ["taiwan tours"],
            "gapAnalysis": "Few English operators",
            "recommendations": "Target foreign visitors",
        },
        "uspAnalysis": {
            "uniqueSellingPoints": ["Local guides", "Support van"],
            "differentiationStrategy": "Small groups",
            "positioningStatement": "Taiwan's friendliest rides",
        },
        "contentOptimization": {
            "titleLength": {"current": 45, "recommended": "Keep within 60 characters"},
            "descriptionLength": {"current": 120, "recommended": "Aim for 155 characters"},
            "readabilityScore": {"score": 85, "suggestions": "Add calls to action"},
        },
    },
    "structuredData": {
        "organization": {
            "type": "Organization",
            "name": "Island Rides",
            "description": "Cycling tour operator",
            "url": "https://example.com",
            "contactPoint": {"telephone": "+886-2-1234-5678", "contactType": "customer service"},
        },
        "products": [
            {
                "type": "Product",
                "name": "Ten-day island loop",
                "description": "Classic route",
                "brand": "Island Rides",
                "category": "Tour",
            },
        ],
        "website": {
            "type": "WebSite",
            "url": "https://example.com",
            "name": "Island Rides",
            "description": "Cycling tours",
        },
    },
}


class FakeModelClient(ModelClient):
    """Model client returning a canned response and recording the prompts it received."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []
        self.closed = False

    async def generate(self, prompts):
        self.prompts.append(prompts)
        if self.error is not None:
            raise self.error
        return self.response

    async def aclose(self):
        self.closed = True


@pytest.fixture
def template_rows() -> list:
    """Rows of a filled-in content template."""
    return copy.deepcopy(TEMPLATE_ROWS)


@pytest.fixture
def generated_tree() -> dict:
    """A complete Content Tree as returned by the model."""
    return copy.deepcopy(GENERATED_TREE)


@pytest.fixture
def model_response(generated_tree) -> str:
    """Model response text wrapped the way models often return it."""
    return "```json\n" + json.dumps(generated_tree, ensure_ascii=False, indent=2) + "\n```"


@pytest.fixture
def template_csv(tmp_path: Path) -> Path:
    """Write the content template to a CSV file with a byte-order mark."""
    csv_path = tmp_path / "template.csv"
    csv_path.write_bytes(encode_csv(TEMPLATE_ROWS))
    return csv_path


@pytest.fixture
def fake_client(model_response) -> FakeModelClient:
    """Model client that returns the generated tree."""
    return FakeModelClient(response=model_response)


@pytest.fixture
def client_factory():
    """Build FakeModelClient instances with a custom response or error."""
    return FakeModelClient
