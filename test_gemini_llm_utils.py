import os
import unittest
from unittest.mock import MagicMock, patch

from gemini_llm_utils import LLMConfigError, call_gemini, get_api_key
from naver_ad_config import DEFAULT_CONFIG


class TestGeminiLLMUtils(unittest.TestCase):
    def test_missing_api_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(LLMConfigError):
                get_api_key(DEFAULT_CONFIG)

    def test_api_key_from_environment(self):
        with patch.dict(os.environ, {'GEMINI_API_KEY': "test-key"}):
            self.assertEqual(get_api_key(DEFAULT_CONFIG), "test-key")

    @patch('gemini_llm_utils.genai.Client')
    def test_call_gemini(self, mock_client_class):
        client = MagicMock()
        client.models.generate_content.return_value = MagicMock(text='{"words": []}')
        mock_client_class.return_value = client

        with patch.dict(os.environ, {'GEMINI_API_KEY': "test-key"}):
            reply = call_gemini("프롬프트", model="gemini-2.5-flash", config=DEFAULT_CONFIG)

        self.assertEqual(reply, '{"words": []}')
        mock_client_class.assert_called_once_with(api_key="test-key")
        kwargs = client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs['model'], "gemini-2.5-flash")
        self.assertEqual(kwargs['contents'], "프롬프트")
        self.assertEqual(kwargs['config'].max_output_tokens, 4096)

    @patch('gemini_llm_utils.genai.Client')
    def test_empty_reply(self, mock_client_class):
        mock_client_class.return_value.models.generate_content.return_value = MagicMock(text=None)
        with patch.dict(os.environ, {'GEMINI_API_KEY': "test-key"}):
            with self.assertRaises(ValueError):
                call_gemini("프롬프트", config=DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main()
