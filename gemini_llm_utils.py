import os

from google import genai
from google.genai import types

from naver_ad_config import load_config


class LLMConfigError(RuntimeError):
    """No API key configured for the language model."""


def get_api_key(config=None):
    config = config or load_config()
    env_var = config['llm']['api_key_env']
    api_key = os.environ.get(env_var, "")
    if not api_key:
        raise LLMConfigError(f"{env_var}가 설정되지 않았습니다.")
    return api_key


def call_gemini(prompt, model=None, config=None):
    """
    Send a single prompt to Gemini and return the text of the reply.
    Raises LLMConfigError when no API key is set.
    """
    config = config or load_config()
    llm_config = config['llm']
    client = genai.Client(api_key=get_api_key(config))
    response = client.models.generate_content(
        model=model or llm_config['insight_model'],
        contents=prompt,
        config=types.GenerateContentConfig(
            max_output_tokens=llm_config['max_output_tokens'],
        ),
    )
    text = response.text
    if not text:
        raise ValueError("Gemini API 응답 형식이 올바르지 않습니다.")
    return text


if __name__ == "__main__":
    print(call_gemini("한 문장으로 자기소개를 해주세요.", model=load_config()['llm']['morpheme_model']))
