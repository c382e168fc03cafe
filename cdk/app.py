#!/usr/bin/env python3
import aws_cdk as cdk
from relay_stack import ChatRelayStack

app = cdk.App()

# 환경 설정
env = cdk.Environment(
    account=app.node.try_get_context("account"),
    region=app.node.try_get_context("region") or "ap-northeast-2"
)

# 🔧 환경별 배포 설정
# 기본(로컬), 프로덕션, 개발
environments = {
    '': 'local',
    'Prod': 'prod',
    'Dev': 'dev',
}

for stack_suffix, domain_suffix in environments.items():
    ChatRelayStack(
        app,
        f"ChatRelay{stack_suffix}",
        stack_name=f"ChatRelay{stack_suffix}",
        description=f"English Chat Relay - {domain_suffix.upper()} Environment",
        env=env,
        tags={
            "Environment": domain_suffix,
            "Project": "EnglishChatRelay",
            "Owner": "CI/CD"
        }
    )

    print(f"✅ {domain_suffix.upper()} stack configured: ChatRelay{stack_suffix}")

app.synth()
