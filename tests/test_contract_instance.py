from __future__ import annotations

import pytest

from sophia_sdk import address
from sophia_sdk.config import ContractOptions
from sophia_sdk.contracts import (
    ContractInstance,
    LifecycleState,
    get_contract_instance,
)
from sophia_sdk.errors import (
    ArgumentValidationError,
    MissingSourceError,
    NotDeployedError,
    UnknownFunctionError,
)
from sophia_sdk.types import NOTHING, Some

SOURCE = "contract Identity =\n  entrypoint init(x : int) = x\n"


async def _deployed(compiler, node, **kw):
    c = await get_contract_instance(compiler, node, SOURCE, **kw)
    await c.deploy([1])
    return c


@pytest.mark.asyncio
async def test_factory_fetches_aci(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    assert compiler.calls == [("get_aci", SOURCE)]
    assert c.aci.name == "Identity"
    assert c.interface.startswith("contract Identity")
    assert c.state is LifecycleState.UNINITIALIZED


@pytest.mark.asyncio
async def test_factory_needs_source_or_aci(compiler, node, aci_doc):
    with pytest.raises(MissingSourceError):
        await get_contract_instance(compiler, node)
    c = await get_contract_instance(compiler, node, aci=aci_doc)
    assert compiler.calls == []
    with pytest.raises(MissingSourceError):
        await c.compile()


@pytest.mark.asyncio
async def test_compile_always_recompiles(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    await c.compile()
    first = c.compiled
    await c.compile()
    assert c.compiled != first
    assert c.state is LifecycleState.COMPILED
    assert [name for name, _ in compiler.calls].count("compile") == 2


@pytest.mark.asyncio
async def test_deploy_compiles_implicitly(compiler, node, contract_address):
    c = await get_contract_instance(compiler, node, SOURCE)
    out = await c.deploy([321])
    assert out is c
    assert ("compile", SOURCE) in compiler.calls
    assert c.state is LifecycleState.DEPLOYED
    assert c.address == contract_address
    assert c.deploy_info.owner == "ak_owner"
    assert c.deploy_info.created_at == 1700000000
    assert c.deploy_info.raw_tx == "tx_raw"

    name, call = node.calls[0]
    assert name == "deploy"
    assert call["bytecode"] == c.compiled
    assert call["source"] == SOURCE
    assert call["args"] == ["321"]


@pytest.mark.asyncio
async def test_deploy_does_not_recompile(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    await c.compile()
    await c.deploy([1])
    assert [name for name, _ in compiler.calls].count("compile") == 1


@pytest.mark.asyncio
async def test_deploy_validates_init_args(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    with pytest.raises(ArgumentValidationError):
        await c.deploy(["nope"])
    assert node.calls == []


@pytest.mark.asyncio
async def test_deploy_without_init_passes_args_through(compiler, node, aci_doc):
    contract = aci_doc["encoded_aci"]["contract"]
    contract["functions"] = [f for f in contract["functions"] if f["name"] != "init"]
    c = await get_contract_instance(compiler, node, SOURCE, aci=aci_doc)
    await c.deploy()
    assert node.calls[0][1]["args"] == []


@pytest.mark.asyncio
async def test_call_before_deploy_fails(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    with pytest.raises(NotDeployedError):
        await c.call("int_fn", [1])
    await c.compile()
    with pytest.raises(NotDeployedError):
        await c.call("int_fn", [1])
    assert node.calls == []


@pytest.mark.asyncio
async def test_call_unknown_function(compiler, node):
    c = await _deployed(compiler, node)
    with pytest.raises(UnknownFunctionError):
        await c.call("nope", [])
    with pytest.raises(ValueError):
        await c.call("", [])


@pytest.mark.asyncio
async def test_call_validation_fails_before_node(compiler, node):
    c = await _deployed(compiler, node)
    with pytest.raises(ArgumentValidationError) as ei:
        await c.call("four", [1, "x", "nope", True])
    assert ei.value.issues[0].path[0] == 2
    assert [n for n, _ in node.calls] == ["deploy"]


@pytest.mark.asyncio
async def test_attach_to_existing_contract(compiler, node, aci_doc, contract_address):
    c = ContractInstance(compiler=compiler, node=node, aci=aci_doc, contract_address=contract_address)
    assert c.state is LifecycleState.DEPLOYED
    res = await c.call("int_fn", [5])
    assert await res.decode() == 5


@pytest.mark.asyncio
async def test_call_and_lazy_decode(compiler, node, contract_address):
    c = await _deployed(compiler, node)
    res = await c.call("list_fn", [[1, 2, 3]])
    name, call = node.calls[-1]
    assert name == "call"
    assert call["args"] == ["[1,2,3]"]
    assert call["address"] == contract_address
    assert res.return_value == "[1,2,3]"
    assert res["hash"] == "th_call"
    assert not [n for n, _ in compiler.calls if n == "decode_data"]

    assert await res.decode() == [1, 2, 3]
    assert compiler.calls[-1] == ("decode_data", "list(int)")


@pytest.mark.asyncio
async def test_static_call_is_pinned_by_top(compiler, node):
    c = await _deployed(compiler, node)
    node.returns["get_state"] = "321"
    res = await c.call("get_state", [], {"call_static": True, "top": "kh_1"})
    name, call = node.calls[-1]
    assert name == "call_static"
    assert call["options"]["top"] == "kh_1"
    assert await res.decode() == 321


@pytest.mark.asyncio
async def test_skip_args_convert(compiler, node):
    c = await _deployed(compiler, node)
    await c.call("int_fn", ["raw literal"], {"skip_args_convert": True})
    assert node.calls[-1][1]["args"] == ["raw literal"]


@pytest.mark.asyncio
async def test_skip_transform_decoded(compiler, node):
    c = await _deployed(compiler, node)
    res = await c.call("list_fn", [[7]], {"skip_transform_decoded": True})
    assert await res.decode() == {"value": [{"value": 7}]}
    assert await res.decode(skip_transform_decoded=False) == [7]


@pytest.mark.asyncio
async def test_explicit_type_hint_is_sent_to_decoder(compiler, node):
    c = await _deployed(compiler, node)
    res = await c.call("int_fn", [3])
    assert await res.decode("int") == 3
    assert compiler.calls[-1] == ("decode_data", "int")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fn,arg,expected",
    [
        ("int_fn", 42, 42),
        ("string_fn", 'q"uote', 'q"uote'),
        ("bool_fn", True, True),
        ("tuple_fn", (1, "a"), (1, "a")),
        ("option_fn", Some(4), 4),
        ("option_fn", NOTHING, None),
        ("record_fn", {"a": 5, "b": "x"}, {"a": 5, "b": "x"}),
        ("address_fn", 0, 0),
    ],
)
async def test_roundtrip_through_node(compiler, node, fn, arg, expected):
    c = await _deployed(compiler, node)
    res = await c.call(fn, [arg])
    assert await res.decode() == expected


@pytest.mark.asyncio
async def test_address_and_map_roundtrip(compiler, node, account):
    c = await _deployed(compiler, node)
    assert await (await c.call("address_fn", [account])).decode() == account

    res = await c.call("nested_fn", [[[account]]])
    _, payload = address.decode(account)
    assert await res.decode(address_prefix="ct") == [[address.encode(payload, prefix="ct")]]

    res = await c.call("map_fn", [{account: 9}])
    assert await res.decode() == [(account, 9)]


@pytest.mark.asyncio
async def test_contract_reference_argument(compiler, node, contract_address):
    c = await _deployed(compiler, node)
    _, payload = address.decode(contract_address)
    node.returns["remote_fn"] = "1"
    await c.call("remote_fn", [contract_address])
    assert node.calls[-1][1]["args"] == ["#" + payload.hex()]


@pytest.mark.asyncio
async def test_option_layering(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE, options={"gas": 10})
    await c.deploy([1], {"gas": 20})
    assert node.calls[-1][1]["options"]["gas"] == 20
    assert c.options.gas == 10

    c.set_options(gas=30, nonce=4)
    await c.call("int_fn", [1])
    opts = node.calls[-1][1]["options"]
    assert opts["gas"] == 30
    assert opts["nonce"] == 4

    await c.call("int_fn", [1], {"gas": 40})
    assert node.calls[-1][1]["options"]["gas"] == 40
    assert c.options.gas == 30


@pytest.mark.asyncio
async def test_source_option_overrides_instance_source(compiler, node):
    c = await _deployed(compiler, node)
    await c.call("int_fn", [1], {"source": "contract Other = ..."})
    assert node.calls[-1][1]["source"] == "contract Other = ..."
    await c.call("int_fn", [1])
    assert node.calls[-1][1]["source"] == SOURCE


@pytest.mark.asyncio
async def test_method_table(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE)
    assert set(c.methods) == set(c.aci.function_names)
    with pytest.raises(TypeError):
        c.methods["x"] = None  # type: ignore[index]

    out = await c.methods["init"](5)
    assert out is c
    assert node.calls[-1][0] == "deploy"
    assert node.calls[-1][1]["args"] == ["5"]

    res = await c.methods["four"](1, "x", [2], False)
    assert node.calls[-1][1]["args"] == ["1", '"x"', "[2]", "false"]
    assert res.function == "four"

    await c.methods["int_fn"](1, options={"call_static": True})
    assert node.calls[-1][0] == "call_static"


@pytest.mark.asyncio
async def test_options_object_does_not_reset_instance_options(compiler, node):
    c = await get_contract_instance(compiler, node, SOURCE, options={"gas": 10, "address_prefix": "ct"})
    await c.deploy([1], ContractOptions(amount=5))
    opts = node.calls[-1][1]["options"]
    assert opts["amount"] == 5
    assert opts["gas"] == 10
    assert opts["address_prefix"] == "ct"

    c.set_options(ContractOptions(deposit=3))
    assert c.options.gas == 10
    assert c.options.deposit == 3
