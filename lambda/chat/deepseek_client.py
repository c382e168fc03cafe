"""
DeepSeek Chat Completion 클라이언트
- 영어 튜터 시스템 프롬프트 주입
- 단일 요청 (재시도 없음, 30초 타임아웃)
- 응답 형식 검증
"""
import json
import os
import time
import socket
import logging
import http.client
import urllib.request
import urllib.error
from typing import Dict, List, Any, Optional

logger = logging.getLogger()
logger.setLevel(logging.INFO)

DEFAULT_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_MODEL = "deepseek-chat"

TUTOR_SYSTEM_PROMPT = """You are a professional English AI teaching assistant. Users can only ask questions in English. Your tasks are:

1. Provide detailed, helpful English learning content (vocabulary, grammar, writing, pronunciation, etc.)
2. Give specific example sentences and usage scenarios
3. Provide complete Chinese translation
4. Use encouraging and educational tone
5. If asked about vocabulary meaning, provide definition, usage and examples
6. If asked about grammar, clearly explain rules with examples
7. If asked about writing, give structured guidance
8. Responses should be comprehensive but concise

Please reply in the following format:
[English response content with detailed explanations and examples]

Then add at the end:
<div class="translation">[Corresponding Chinese translation]</div>

Remember: Users can only ask questions in English, you must reply in both Chinese and English to help users learn English better! Focus on practicality and educational value."""


class UpstreamError(Exception):
    """DeepSeek 호출 실패 (상태 코드, 네트워크, 타임아웃, 응답 형식)"""


class DeepSeekChatClient:
    """
    DeepSeek chat/completions 엔드포인트 호출기
    호출마다 새 연결을 사용하며 상태를 갖지 않습니다.
    """

    def __init__(self, api_url: Optional[str] = None, model: Optional[str] = None):
        self.api_url = api_url or os.environ.get("DEEPSEEK_API_URL", DEFAULT_API_URL)

        # 설정값
        self.config = {
            "model": model or os.environ.get("DEEPSEEK_MODEL", DEFAULT_MODEL),
            "max_tokens": 1200,
            "temperature": 0.7,
            "timeout": 30,  # 30초 타임아웃
        }

    def build_payload(self, user_message: str) -> Dict[str, Any]:
        """시스템 프롬프트 + 사용자 메시지로 요청 본문 구성"""
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": TUTOR_SYSTEM_PROMPT},
            {"role": "user", "content": user_message}
        ]
        return {
            "model": self.config["model"],
            "messages": messages,
            "max_tokens": self.config["max_tokens"],
            "temperature": self.config["temperature"],
            "stream": False
        }

    def complete(self, api_key: str, user_message: str) -> str:
        """
        DeepSeek API 를 한 번 호출하고 choices[0].message.content 를 반환합니다.
        실패 시 UpstreamError 를 발생시킵니다.
        """
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }
        req = urllib.request.Request(
            self.api_url,
            data=json.dumps(self.build_payload(user_message)).encode("utf-8"),
            headers=headers,
            method="POST"
        )

        start_time = time.time()
        try:
            with urllib.request.urlopen(req, timeout=self.config["timeout"]) as response:
                status = response.status
                raw_body = response.read()

        except urllib.error.HTTPError as e:
            # 오류 본문은 기록하지 않음
            logger.error(f"DeepSeek API HTTP 오류 {e.code}: {e.reason}")
            raise UpstreamError(f"API returned status {e.code}")

        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                logger.error("DeepSeek API 연결 타임아웃")
                raise UpstreamError("Request timeout")
            logger.error(f"DeepSeek API URL 오류: {e.reason}")
            raise UpstreamError(f"HTTP request failed: {e.reason}")

        except socket.timeout:
            logger.error("DeepSeek API 응답 타임아웃")
            raise UpstreamError("Request timeout")

        except http.client.IncompleteRead as e:
            logger.error(f"DeepSeek API 응답 본문 잘림: {e!r}")
            raise UpstreamError("Failed to parse response")

        except http.client.HTTPException as e:
            logger.error(f"DeepSeek API 프로토콜 오류: {e!r}")
            raise UpstreamError(f"HTTP request failed: {e!r}")

        except OSError as e:
            logger.error(f"DeepSeek API 네트워크 오류: {str(e)}")
            raise UpstreamError(f"HTTP request failed: {e}")

        elapsed_time = time.time() - start_time
        logger.info(f"DeepSeek API 호출 완료: {elapsed_time:.2f}초")

        if status != 200:
            raise UpstreamError(f"API returned status {status}")

        return self._extract_content(raw_body)

    def _extract_content(self, raw_body: bytes) -> str:
        """응답 본문 파싱 및 형식 검증"""
        try:
            data = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise UpstreamError("Failed to parse response")

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise UpstreamError("Invalid response format")

        message = choices[0].get("message")
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise UpstreamError("Invalid response format")

        usage = data.get("usage")
        if isinstance(usage, dict):
            logger.info(f"DeepSeek 토큰 사용량: {usage.get('total_tokens', 0)}")

        return message["content"]
