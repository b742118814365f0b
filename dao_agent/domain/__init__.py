"""领域层模型与状态。

包含：
- models: 统一的 ChatMessage / GatewayRequest / GatewayResult / DomainContext 模型。
- conversation: 客户端会话状态容器 ConversationStore。
- context: 项目数据到 DomainContext 的映射。
- exceptions: 业务异常类型定义。
"""
