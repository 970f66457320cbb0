#!/usr/bin/env python3
"""
Ad Insights
Morpheme frequency analysis, market insight and ad creative generation over
collected Naver search-ad records, backed by a language model.
"""

import json
from collections import Counter

from gemini_llm_utils import call_gemini
from naver_ad_config import load_config

PARSE_FAILED = "분석 결과 파싱에 실패했습니다."
STRATEGY_PARSE_FAILED = "전략 분석 결과 파싱에 실패했습니다."

MARKET_FALLBACK = {
    'market_standard_formula': PARSE_FAILED,
    'extension_asset_landscape': PARSE_FAILED,
    'morpheme_intent_clustering': [],
    'message_saturation': PARSE_FAILED,
}
STRATEGY_FALLBACK = {
    'market_winning_logic': STRATEGY_PARSE_FAILED,
    'strategic_differentiation': STRATEGY_PARSE_FAILED,
    'asset_optimization_plan': [],
    'operational_roadmap': STRATEGY_PARSE_FAILED,
}


class InsightInputError(ValueError):
    """Request payload is missing the data an analysis needs."""


class InsightResponseError(ValueError):
    """Model reply could not be turned into the expected JSON."""


def extract_text_from_ads(ads):
    """Join the copy of every ad into one text for morpheme analysis."""
    parts = []
    for ad in ads:
        brand = ad.get('brand') or {}
        ad_text = ad.get('adText') or {}
        assets = ad.get('assets') or {}

        for value in (brand.get('name'), ad_text.get('title'), ad_text.get('desc'),
                      assets.get('promotionText')):
            if value:
                parts.append(value)
        for key in ('sitelinkText', 'naverMapTag', 'thumbNailText'):
            parts.extend(value for value in assets.get(key) or [] if value)

    return ' '.join(parts)


def count_morphemes(words):
    """
    Returns:
        list: [{'word', 'count'}] by descending count, ties in first-seen order
    """
    counts = Counter(word for word in words if word)
    return [{'word': word, 'count': count} for word, count in counts.most_common()]


def parse_json_response(text):
    """Parse model output that may be wrapped in a ```json fence."""
    json_text = (text or "").strip()
    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]
    if json_text.endswith("```"):
        json_text = json_text[:-3]
    json_text = json_text.strip()

    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON 파싱 실패: {e}") from e


def build_morpheme_prompt(text):
    return f"""## 역할
다음 한국어 광고 텍스트에서 형태소 분석을 수행해주세요.

## 입력 텍스트
{text}

## 목표
1. 텍스트를 형태소로 분리합니다.
2. 조사, 어미, 접사, 부호, 기호, 숫자, 단독 영문자는 제외합니다.
3. 남은 의미 있는 형태소(명사, 동사 어간, 형용사 어간, 부사 등)를 모두 배열로 반환합니다.

## 제약사항
- 아래 JSON 구조를 엄격히 지키세요.
- 중복된 단어도 모두 포함하여 반환하세요. 빈도 계산은 별도로 수행됩니다.

## 출력 구조 (Strictly JSON)
{{
  "words": ["단어1", "단어2", "단어1", "단어3"]
}}
"""


def build_market_prompt(ads, morpheme_counts):
    morpheme_raw = '\n'.join(f"{m['word']}: {m['count']}회" for m in morpheme_counts)
    ads_json = json.dumps(ads, ensure_ascii=False, indent=2)
    return f"""## 역할
당신은 대규모 광고 데이터를 처리하는 검색광고 전략 분석가입니다. 시장 전체의 소재 구성 문법과 형태소 결합 패턴을 해석합니다.

## 분석 로직
1. market_standard_formula: 제목과 설명에서 가장 빈번한 문장 구조 공식
2. extension_asset_landscape: 확장 소재의 채택률과 효과적인 자산 조합
3. morpheme_intent_clustering: 형태소 빈도 기반 의도 그룹
4. message_saturation: 과포화 메시지와 희소한 소구점 대조

## 제약사항
- 개별 광고주명은 언급하지 마세요.
- 별표 기호를 사용하지 마세요.

## 출력 구조 (Strictly JSON)
{{
  "market_standard_formula": "...",
  "extension_asset_landscape": "...",
  "morpheme_intent_clustering": ["그룹1(의도)", "그룹2(의도)", "그룹3(의도)"],
  "message_saturation": "..."
}}

## 입력 데이터(수집 광고 소재)
{ads_json}

## 입력 데이터(광고 소재 형태소)
{morpheme_raw}"""


def build_strategy_prompt(market_result):
    market_json = json.dumps(market_result, ensure_ascii=False, indent=2)
    return f"""## 역할
당신은 퍼포먼스 마케팅 전략 컨설턴트입니다.

## 요구사항 (각 항목 100자 이상)
1. market_winning_logic: 클릭률을 높일 최적의 소재 공식
2. strategic_differentiation: 경쟁사가 비워 둔 언어 영역과 카피 전략
3. asset_optimization_plan: 확장 소재 자산 믹스 가이드
4. operational_roadmap: 즉시 적용 가능한 운영 로드맵

## 제약사항
- 오직 JSON 객체만 출력하세요.
- 구체적인 예상 성과 지표를 언급하지 마세요.

## 출력 구조 (Strictly JSON)
{{
  "market_winning_logic": "...",
  "strategic_differentiation": "...",
  "asset_optimization_plan": [{{"사이트링크": "..."}}, {{"홍보문구": "..."}}, {{"네이버 지도 태그": "..."}}, {{"네이버 지도 가격링크": "..."}}, {{"썸네일텍스트": "..."}}],
  "operational_roadmap": "..."
}}

## 입력 데이터(광고 소재 분석결과)
{market_json}"""


def build_creative_prompt(strategy_result):
    strategy_json = json.dumps(strategy_result, ensure_ascii=False, indent=2)
    return f"""## 역할
당신은 네이버 검색광고 가이드라인에 정통한 카피라이터입니다. 전략 인사이트를 바탕으로 광고 소재 3세트를 생성합니다.

## 소재 구성
1. adText.title: 15자 이내
2. adText.desc: 45자 이내
3. assets.promotionText: 14자 이내
4. assets.siteLink: 4개, 각 6~8자
5. assets.thumbNailText: 3개, 각 4자 이내

## 소재 3종
- Winning Logic: 시장 표준 공식을 따른 안정적 소재
- Differentiation: 경쟁사의 빈틈을 공략하는 차별화 소재
- Action Oriented: 즉각적인 혜택과 행동을 유도하는 소재

## 제약사항
- 최상급 표현과 과장 광고 어휘를 사용하지 마세요.
- 별표 기호를 사용하지 마세요.
- 오직 JSON 객체만 출력하세요.

## 출력형태 (Strictly JSON)
{{
  "ad_creatives": [
    {{
      "version": "Winning Logic",
      "adText": {{"title": "...", "desc": "..."}},
      "assets": {{"promotionText": "...", "siteLink": ["...", "...", "...", "..."], "thumbNailText": ["...", "...", "..."]}}
    }}
  ]
}}

## 입력 데이터(전략 인사이트)
{strategy_json}"""


class AdInsightService:
    def __init__(self, llm=None, config=None):
        """
        Args:
            llm (callable): (prompt, model) -> reply text; Gemini by default
            config (dict): Configuration, see naver_ad_config
        """
        self.config = config or load_config()
        self.models = self.config['llm']
        self.llm = llm or self._call_gemini

    def _call_gemini(self, prompt, model):
        return call_gemini(prompt, model=model, config=self.config)

    def analyze_morphemes(self, ads):
        if not ads:
            raise InsightInputError("분석할 광고 데이터가 없습니다.")
        text = extract_text_from_ads(ads)
        if not text.strip():
            raise InsightInputError("분석할 텍스트가 없습니다.")

        reply = self.llm(build_morpheme_prompt(text), self.models['morpheme_model'])
        try:
            words = parse_json_response(reply).get('words') or []
        except (ValueError, AttributeError) as e:
            raise InsightResponseError(f"형태소 분석 결과 파싱 실패: {e}") from e

        morpheme_counts = count_morphemes(words)
        return {'morphemeCounts': morpheme_counts, 'totalWords': len(morpheme_counts)}

    def _parse_or_fallback(self, reply, fallback, label):
        try:
            result = parse_json_response(reply)
        except ValueError:
            print(f"{label} JSON 파싱 실패: {reply[:200]}")
            return dict(fallback)
        if not isinstance(result, dict):
            print(f"{label} JSON 파싱 실패: object expected")
            return dict(fallback)
        return result

    def generate_insights(self, ads, morpheme_counts):
        if not ads:
            raise InsightInputError("광고 데이터가 없습니다.")
        if not morpheme_counts:
            raise InsightInputError("형태소 데이터가 없습니다.")

        model = self.models['insight_model']
        market_reply = self.llm(build_market_prompt(ads, morpheme_counts), model)
        market_result = self._parse_or_fallback(market_reply, MARKET_FALLBACK, "프롬프트1")

        strategy_reply = self.llm(build_strategy_prompt(market_result), model)
        strategy_result = self._parse_or_fallback(strategy_reply, STRATEGY_FALLBACK, "프롬프트2")

        return {'prompt1Result': market_result, 'prompt2Result': strategy_result}

    def generate_creatives(self, strategy_result):
        if not strategy_result:
            raise InsightInputError("전략 인사이트 데이터가 없습니다.")

        reply = self.llm(build_creative_prompt(strategy_result), self.models['creative_model'])
        try:
            result = parse_json_response(reply)
        except ValueError as e:
            print(f"소재 생성 JSON 파싱 실패: {reply[:200]}")
            raise InsightResponseError("소재 생성 결과 파싱에 실패했습니다.") from e
        if not isinstance(result, dict) or 'ad_creatives' not in result:
            raise InsightResponseError("소재 생성 결과 파싱에 실패했습니다.")
        return result


def analyze_morphemes(ads, llm=None):
    return AdInsightService(llm=llm).analyze_morphemes(ads)


def generate_insights(ads, morpheme_counts, llm=None):
    return AdInsightService(llm=llm).generate_insights(ads, morpheme_counts)


def generate_creatives(strategy_result, llm=None):
    return AdInsightService(llm=llm).generate_creatives(strategy_result)


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2 or sys.argv[1] in ['--help', '-h']:
        print("Usage: python ad_insights.py RECORDS_JSON")
        print("  RECORDS_JSON: file written by naver_ad_pipeline.py --output")
        sys.exit(0)

    with open(sys.argv[1], 'r', encoding='utf-8') as f:
        records = json.load(f)

    service = AdInsightService()
    morphemes = service.analyze_morphemes(records)
    print(f"Distinct morphemes: {morphemes['totalWords']}")
    for item in morphemes['morphemeCounts'][:20]:
        print(f"  {item['word']}: {item['count']}")

    insights = service.generate_insights(records, morphemes['morphemeCounts'])
    print(json.dumps(insights, ensure_ascii=False, indent=2))
