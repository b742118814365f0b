"""DAO 项目数据 -> DomainContext 的映射。

外部项目数据模型（generalInfo / onChainData / votingRounds ...）的结构只在这里出现，
上游结构变化时只需要改这个文件。
"""

from copy import deepcopy
from typing import Any, List, Mapping, Optional

from .conversation import ConversationStore
from .models import DomainContext


def _get(source: Any, key: str) -> Any:
    """同时兼容 dict 与属性对象，缺失时返回 None。"""

    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def _snapshot_list(value: Any) -> Optional[List[Any]]:
    """复制列表及其中的记录，之后修改上游数据不会影响快照。"""

    if value is None:
        return None
    return deepcopy(list(value))


def bind_project_context(
    project: Any,
    user_address: Optional[str] = None,
    store: Optional[ConversationStore] = None,
) -> DomainContext:
    """把项目记录逐字段映射为 DomainContext；传入 store 时同时写入会话状态。"""

    general = _get(project, "generalInfo")
    on_chain = _get(project, "onChainData")
    context = DomainContext(
        project_id=_get(general, "project_id"),
        project_name=_get(general, "name"),
        token_symbol=_get(general, "token_symbol"),
        total_supply=_get(on_chain, "totalSupply"),
        current_proposals=_snapshot_list(_get(on_chain, "actions")),
        voting_rounds=_snapshot_list(_get(project, "votingRounds")),
        user_balance=_get(project, "userBalance"),
        user_address=user_address,
    )
    if store is not None:
        store.set_context(context)
    return context


def clear_context(store: ConversationStore) -> None:
    """离开项目页面时清空上下文。"""

    store.set_context(None)
