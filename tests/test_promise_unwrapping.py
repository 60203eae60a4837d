from structlog.testing import capture_logs

from typedoc_openapi.schema.models import Schema

from typedoc_builders import compiler_for, interface, intrinsic, prop, ref, type_node, union


def status_result(name: str) -> dict:
    declaration = interface(name, prop("statusCode", intrinsic("number")), kind="Class")
    declaration["implementedTypes"] = [ref("IHttpActionResult")]
    return declaration


USER = interface("User", prop("id", intrinsic("string")))
ORDER = interface("Order", prop("id", intrinsic("string")))
DECLARATIONS = (USER, ORDER, status_result("NotFoundResult"), status_result("BadRequestResult"))


def ok(argument: dict) -> dict:
    return ref("OkNegotiatedContentResult", argument)


class TestPromiseUnwrapping:
    def test_plain_argument(self):
        compiler = compiler_for(*DECLARATIONS)
        assert compiler.compile(type_node(ref("Promise", ref("User")))) == Schema.pointer("User")

    def test_void_promise(self):
        compiler = compiler_for()
        assert compiler.compile(type_node(ref("Promise", intrinsic("void")))) == Schema(type="null")

    def test_promise_without_argument(self):
        assert compiler_for().compile(type_node(ref("Promise"))) == Schema(type="null")

    def test_ok_result_wins_over_status_results(self):
        compiler = compiler_for(*DECLARATIONS)
        node = ref("Promise", union(ok(ref("User")), ref("NotFoundResult"), ref("BadRequestResult")))
        assert compiler.compile(type_node(node)) == Schema.pointer("User")
        assert "NotFoundResult" not in compiler.references

    def test_several_ok_results_become_one_of(self):
        compiler = compiler_for(*DECLARATIONS)
        node = ref("Promise", union(ok(ref("User")), ok(ref("Order")), ref("NotFoundResult")))
        schema = compiler.compile(type_node(node))
        assert schema.one_of == [Schema.pointer("User"), Schema.pointer("Order")]

    def test_status_results_are_dropped(self):
        compiler = compiler_for(*DECLARATIONS)
        node = ref("Promise", union(ref("User"), ref("NotFoundResult")))
        assert compiler.compile(type_node(node)) == Schema.pointer("User")

    def test_several_payloads_become_one_of(self):
        compiler = compiler_for(*DECLARATIONS)
        node = ref("Promise", union(ref("User"), intrinsic("string"), ref("BadRequestResult")))
        schema = compiler.compile(type_node(node))
        assert schema.one_of == [Schema.pointer("User"), Schema(type="string")]

    def test_only_status_results_falls_back_to_union(self):
        compiler = compiler_for(*DECLARATIONS)
        node = ref("Promise", union(ref("NotFoundResult"), ref("BadRequestResult")))
        with capture_logs() as logs:
            schema = compiler.compile(type_node(node))
        assert schema.one_of == [Schema.pointer("NotFoundResult"), Schema.pointer("BadRequestResult")]
        assert any(log["event"] == "promise.no_payload_branch" for log in logs)
