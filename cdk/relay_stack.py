import os
from pathlib import Path
from aws_cdk import (
    Stack,
    aws_lambda as lambda_,
    aws_apigateway as apigateway,
    aws_cloudwatch as cloudwatch,
    Duration,
    CfnOutput
)
from constructs import Construct

# cdk/ 기준 상대 경로 대신 파일 위치 기준으로 고정
CHAT_LAMBDA_DIR = str(Path(__file__).resolve().parent.parent / "lambda" / "chat")


class ChatRelayStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # 1. Lambda 함수 생성
        self.create_lambda_functions()

        # 2. API Gateway 생성
        self.create_api_gateway()

        # 3. CloudWatch 알람 생성
        self.create_cloudwatch_alarms()

        # 4. 출력값
        self.create_outputs()

    def create_lambda_functions(self):
        """DeepSeek 중계 Lambda 생성"""
        # 키는 코드에 두지 않음: cdk deploy -c deepseek_api_key=... 또는 배포 쉘 환경변수
        api_key = self.node.try_get_context("deepseek_api_key") or os.environ.get("DEEPSEEK_API_KEY", "")

        self.chat_lambda = lambda_.Function(
            self, "ChatFunction",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="chat.handler",
            code=lambda_.Code.from_asset(
                CHAT_LAMBDA_DIR,
                exclude=["test_*.py", "conftest.py", "__pycache__", ".pytest_cache"]
            ),
            timeout=Duration.seconds(35),  # DeepSeek 30초 타임아웃 + 여유
            memory_size=256,
            environment={
                "DEEPSEEK_API_KEY": api_key,
            }
        )

    def create_api_gateway(self):
        """API Gateway 생성 - /chat 단일 경로"""
        self.api = apigateway.RestApi(
            self, "ChatRelayApi",
            rest_api_name="english-chat-relay-api",
            description="영어 학습 채팅 - DeepSeek 중계"
        )

        chat_resource = self.api.root.add_resource("chat")
        integration = apigateway.LambdaIntegration(self.chat_lambda)

        # preflight 도 Lambda 가 직접 응답
        for method in ("POST", "OPTIONS"):
            chat_resource.add_method(
                method,
                integration,
                authorization_type=apigateway.AuthorizationType.NONE
            )

    def create_cloudwatch_alarms(self):
        """CloudWatch 알람 생성"""
        cloudwatch.Alarm(
            self, "ChatErrorAlarm",
            metric=self.chat_lambda.metric_errors(period=Duration.minutes(5)),
            threshold=3,
            evaluation_periods=2,
            alarm_description="Chat Lambda 함수 오류율이 높습니다"
        )

    def create_outputs(self):
        CfnOutput(
            self, "ApiGatewayUrl",
            value=self.api.url,
            description="API Gateway URL"
        )

        CfnOutput(
            self, "ChatFunctionName",
            value=self.chat_lambda.function_name,
            description="채팅 Lambda 함수 이름"
        )
