import unittest
from unittest.mock import MagicMock, patch

from ad_insights import InsightInputError, InsightResponseError
from gemini_llm_utils import LLMConfigError
from naver_ad_fetcher import NaverAdFetchError
from naver_ad_server import app

COLLECTION = {
    'keyword': "안경",
    'html': "<html></html>",
    'innerText': "Acme\nacme.co.kr",
    'outerTextRaw': "Acme\nacme.co.kr",
    'results': [{'rank': 1, 'brand': {'name': "Acme", 'domain': "acme.co.kr"}}],
    'debug': {'anchorCount': 1},
}


class TestNaverAdServer(unittest.TestCase):
    def setUp(self):
        self.client = app.test_client()

    def test_index(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)

    def test_naver_ad_requires_keyword(self):
        response = self.client.get('/api/naver-ad?keyword=%20')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.get_json())

    @patch('naver_ad_server.collect_naver_ads')
    def test_naver_ad_success(self, mock_collect):
        mock_collect.return_value = COLLECTION
        response = self.client.get('/api/naver-ad', query_string={'keyword': "안경"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['results'][0]['brand']['name'], "Acme")
        mock_collect.assert_called_once_with("안경")
        self.assertIn("안경", response.get_data(as_text=True))

    @patch('naver_ad_server.collect_naver_ads')
    def test_naver_ad_fetch_failure(self, mock_collect):
        mock_collect.side_effect = NaverAdFetchError("페이지 요청 실패: 503", status_code=503)
        response = self.client.get('/api/naver-ad', query_string={'keyword': "안경"})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.get_json()['error'], "페이지 요청 실패: 503")

    @patch('naver_ad_server.collect_naver_ads')
    def test_naver_ad_unexpected_failure(self, mock_collect):
        mock_collect.side_effect = RuntimeError("boom")
        response = self.client.get('/api/naver-ad', query_string={'keyword': "안경"})
        self.assertEqual(response.status_code, 500)

    @patch('naver_ad_server.collect_naver_ads')
    def test_raw_download(self, mock_collect):
        mock_collect.return_value = COLLECTION
        response = self.client.get('/api/naver-ad/raw', query_string={'keyword': "안경"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.mimetype.startswith('text/plain'))
        self.assertEqual(response.get_data(as_text=True), "Acme\nacme.co.kr")
        self.assertIn("attachment", response.headers['Content-Disposition'])

    @patch('naver_ad_server.insight_service')
    def test_morpheme_analysis(self, mock_service):
        service = MagicMock()
        service.analyze_morphemes.return_value = {'morphemeCounts': [], 'totalWords': 0}
        mock_service.return_value = service

        response = self.client.post('/api/morpheme-analysis', json={'data': [{'adText': {}}]})

        self.assertEqual(response.status_code, 200)
        service.analyze_morphemes.assert_called_once_with([{'adText': {}}])

    @patch('naver_ad_server.insight_service')
    def test_morpheme_analysis_errors(self, mock_service):
        service = MagicMock()
        mock_service.return_value = service

        service.analyze_morphemes.side_effect = InsightInputError("분석할 광고 데이터가 없습니다.")
        self.assertEqual(self.client.post('/api/morpheme-analysis', json={}).status_code, 400)

        service.analyze_morphemes.side_effect = LLMConfigError("GEMINI_API_KEY가 설정되지 않았습니다.")
        self.assertEqual(self.client.post('/api/morpheme-analysis', json={'data': [{}]}).status_code, 500)

    @patch('naver_ad_server.insight_service')
    def test_ai_insight(self, mock_service):
        service = MagicMock()
        service.generate_insights.return_value = {'prompt1Result': {}, 'prompt2Result': {}}
        mock_service.return_value = service

        payload = {'ads': [{'rank': 1}], 'morphemeCounts': [{'word': "안경", 'count': 1}]}
        response = self.client.post('/api/ai-insight', json=payload)

        self.assertEqual(response.status_code, 200)
        service.generate_insights.assert_called_once_with(payload['ads'], payload['morphemeCounts'])

    @patch('naver_ad_server.insight_service')
    def test_creative_generation(self, mock_service):
        service = MagicMock()
        mock_service.return_value = service

        service.generate_creatives.return_value = {'ad_creatives': []}
        response = self.client.post('/api/creative-generation', json={'prompt2Result': {'a': 1}})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {'ad_creatives': []})

        service.generate_creatives.side_effect = InsightResponseError("소재 생성 결과 파싱에 실패했습니다.")
        response = self.client.post('/api/creative-generation', json={'prompt2Result': {'a': 1}})
        self.assertEqual(response.status_code, 500)

        service.generate_creatives.side_effect = InsightInputError("전략 인사이트 데이터가 없습니다.")
        response = self.client.post('/api/creative-generation', json={})
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main()
