"""
영어 학습 채팅 Lambda 함수 (DeepSeek 중계)
- POST 메시지를 검증하여 DeepSeek 에 전달
- 영어 답변 / 중국어 번역 분리 후 JSON 반환
- CORS preflight 직접 처리
"""
import json
import os
import sys
import base64
import logging
import traceback
from typing import Dict, Any, Optional

from deepseek_client import DeepSeekChatClient
from response_splitter import split_response

logger = logging.getLogger()
logger.setLevel(logging.INFO)

API_KEY_ENV = "DEEPSEEK_API_KEY"

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Max-Age": "86400"
}

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*"
}


class ChatRelay:
    """
    API Gateway 이벤트 -> DeepSeek -> RelayResult
    completion_client 는 complete(api_key, message) 를 제공하는 객체이면 됩니다 (테스트 대역 주입용).
    """

    def __init__(self, completion_client=None):
        self.completion_client = completion_client or DeepSeekChatClient()

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        http_method = _get_http_method(event)
        logger.info(f"🚀 DeepSeek 채팅 함수 호출 - HTTP Method: {http_method}")

        if http_method == "OPTIONS":
            return {
                "statusCode": 200,
                "headers": dict(CORS_PREFLIGHT_HEADERS),
                "body": "",
                "isBase64Encoded": False
            }

        if http_method != "POST":
            return _create_error_response(405, "Method Not Allowed")

        body = _parse_body(event)
        message = body.get("message")
        if not isinstance(message, str) or not message.strip():
            return _create_error_response(400, "Message is required")
        message = message.strip()

        api_key = os.environ.get(API_KEY_ENV)
        if not api_key:
            logger.error(f"❌ {API_KEY_ENV} 환경변수가 설정되지 않았습니다")
            return _create_error_response(500, "Server configuration error")

        logger.info(f"🔍 메시지 수신: {message[:50]}...")

        try:
            content = self.completion_client.complete(api_key, message)
            result = split_response(content)
        except Exception as e:
            logger.error(f"❌ DeepSeek 호출 오류: {str(e)}")
            logger.error(f"❌ Traceback: {traceback.format_exc()}")
            return _create_error_response(500, "Internal server error", details=str(e))

        logger.info(f"✅ 응답 생성 완료: 영어 {len(result.text)}자, 번역 {len(result.translation)}자")
        return _create_json_response(200, result.to_dict())


def _get_http_method(event: Dict[str, Any]) -> str:
    """REST API(v1) 는 httpMethod, Function URL / HTTP API(v2) 는 requestContext.http.method"""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method", "")
    return str(method).upper()


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """요청 본문 파싱. 비어 있거나 잘못된 JSON 이면 빈 dict"""
    raw = event.get("body") or ""
    try:
        if event.get("isBase64Encoded") and raw:
            raw = base64.b64decode(raw).decode("utf-8")
        body = json.loads(raw or "{}")
    except (ValueError, TypeError) as parse_error:
        logger.warning(f"⚠️ 요청 본문 파싱 실패: {str(parse_error)}")
        return {}
    return body if isinstance(body, dict) else {}


def _create_json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, ensure_ascii=False),
        "isBase64Encoded": False
    }


def _create_error_response(status_code: int, message: str, details: Optional[str] = None) -> Dict[str, Any]:
    """일반적인 JSON 오류 응답을 생성합니다."""
    payload = {"success": False, "error": message}
    if details is not None:
        payload["details"] = details
    return _create_json_response(status_code, payload)


# Lambda 컨테이너 재사용 시 함께 재사용 (불변 설정만 보유)
relay = ChatRelay()


def handler(event, context):
    """API Gateway 요청을 처리하여 영어 답변과 중국어 번역을 반환합니다."""
    return relay.handle(event)


if __name__ == "__main__":
    # 로컬 테스트: python chat.py "What does 'serendipity' mean?"
    logging.basicConfig()
    question = " ".join(sys.argv[1:]) or "What is the difference between 'affect' and 'effect'?"
    test_event = {
        "httpMethod": "POST",
        "body": json.dumps({"message": question})
    }
    result = handler(test_event, {})
    print(f"statusCode: {result['statusCode']}")
    print(json.dumps(json.loads(result["body"]), ensure_ascii=False, indent=2))
