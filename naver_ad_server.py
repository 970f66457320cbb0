from urllib.parse import quote

from flask import Flask, Response, jsonify, request

from ad_insights import (
    AdInsightService,
    InsightInputError,
    InsightResponseError,
)
from gemini_llm_utils import LLMConfigError
from naver_ad_fetcher import NaverAdFetchError
from naver_ad_pipeline import collect_naver_ads

app = Flask(__name__)
app.json.ensure_ascii = False


def error_response(message, status):
    return jsonify({'error': message}), status


def insight_service():
    return AdInsightService()


@app.route('/api/naver-ad', methods=['GET'])
def naver_ad():
    keyword = request.args.get('keyword', '').strip()
    if not keyword:
        return error_response("keyword 파라미터가 필요합니다.", 400)
    try:
        collection = collect_naver_ads(keyword)
    except NaverAdFetchError as e:
        return error_response(str(e), 502)
    except Exception as e:
        print(f"[naver-ad] collection failed: {e}")
        return error_response(str(e) or "알 수 없는 오류가 발생했습니다.", 500)
    return jsonify(collection), 200


@app.route('/api/naver-ad/raw', methods=['GET'])
def naver_ad_raw():
    keyword = request.args.get('keyword', '').strip()
    if not keyword:
        return error_response("keyword 파라미터가 필요합니다.", 400)
    try:
        collection = collect_naver_ads(keyword)
    except NaverAdFetchError as e:
        return error_response(str(e), 502)

    filename = quote(f"{keyword}_raw.txt")
    return Response(
        collection['outerTextRaw'],
        mimetype='text/plain',
        headers={'Content-Disposition': f"attachment; filename*=UTF-8''{filename}"},
    )


@app.route('/api/morpheme-analysis', methods=['POST'])
def morpheme_analysis():
    body = request.get_json(silent=True) or {}
    try:
        result = insight_service().analyze_morphemes(body.get('data') or [])
    except InsightInputError as e:
        return error_response(str(e), 400)
    except LLMConfigError as e:
        return error_response(str(e), 500)
    except Exception as e:
        print(f"형태소 분석 오류: {e}")
        return error_response("형태소 분석 중 오류가 발생했습니다.", 500)
    return jsonify(result), 200


@app.route('/api/ai-insight', methods=['POST'])
def ai_insight():
    body = request.get_json(silent=True) or {}
    try:
        result = insight_service().generate_insights(
            body.get('ads') or [],
            body.get('morphemeCounts') or [],
        )
    except InsightInputError as e:
        return error_response(str(e), 400)
    except LLMConfigError as e:
        return error_response(str(e), 500)
    except Exception as e:
        print(f"AI 인사이트 생성 오류: {e}")
        return error_response("AI 인사이트 생성 중 오류가 발생했습니다.", 500)
    return jsonify(result), 200


@app.route('/api/creative-generation', methods=['POST'])
def creative_generation():
    body = request.get_json(silent=True) or {}
    try:
        result = insight_service().generate_creatives(body.get('prompt2Result'))
    except InsightInputError as e:
        return error_response(str(e), 400)
    except (LLMConfigError, InsightResponseError) as e:
        return error_response(str(e), 500)
    except Exception as e:
        print(f"소재 생성 오류: {e}")
        return error_response("소재 생성 중 오류가 발생했습니다.", 500)
    return jsonify(result), 200


# Default status page
@app.route('/', methods=['GET'])
def index():
    return '<h1>Naver ad collector is running</h1>', 200


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
