"""
tests/analyzers/cloudformation/test_reconcile_stacks.py - Stack 트리 탐색 테스트
"""

from unittest.mock import MagicMock

import pytest
from conftest import FakeStackSource, resource, stack, stack_arn

from analyzers.cloudformation.reconcile.stacks import (
    CloudFormationStackSource,
    StackTreeWalker,
    is_nested_stack_arn,
)
from analyzers.cloudformation.reconcile.types import (
    ACTIVE_STACK_STATUSES,
    DiscoveredResource,
    Leaf,
    NestedStack,
    flatten_tree,
)
from core.exceptions import APICallError, StackTraversalError
from core.parallel import RetryConfig

NO_RETRY = RetryConfig(max_retries=0)


class TestIsNestedStackArn:
    @pytest.mark.parametrize(
        "physical_id, expected",
        [
            (stack_arn("child"), True),
            ("arn:aws-cn:cloudformation:cn-north-1:123456789012:stack/child/abc", True),
            ("arn:aws-us-gov:cloudformation:us-gov-west-1:123456789012:stack/child/abc", True),
            ("arn:aws:cloudformation:us-east-1:123456789012:type/resource/Acme-Foo-Bar", False),
            ("arn:aws:cloudformation:us-east-1:123456789012:stackset/Set:abc", False),
            ("arn:aws:s3:::bucket", False),
            ("my-bucket", False),
            ("", False),
        ],
    )
    def test_detection(self, physical_id, expected):
        assert is_nested_stack_arn(physical_id) is expected


class TestCloudFormationStackSource:
    """boto3 클라이언트 어댑터 테스트"""

    def test_list_root_stacks_sends_status_filter(self):
        client = MagicMock()
        client.list_stacks.return_value = {
            "StackSummaries": [
                {"StackId": stack_arn("a"), "StackName": "a", "StackStatus": "CREATE_COMPLETE"},
                {
                    "StackId": stack_arn("b"),
                    "StackName": "b",
                    "StackStatus": "UPDATE_COMPLETE",
                    "ParentId": stack_arn("a"),
                },
            ],
            "NextToken": "token-2",
        }
        source = CloudFormationStackSource(client)

        items, token = source.list_root_stacks()

        client.list_stacks.assert_called_once_with(StackStatusFilter=list(ACTIVE_STACK_STATUSES))
        assert token == "token-2"
        assert items[0].is_root is True
        assert items[1].parent_id == stack_arn("a")

    def test_next_page_keeps_status_filter(self):
        """다음 페이지 요청에도 상태 필터 포함"""
        client = MagicMock()
        client.list_stacks.return_value = {"StackSummaries": []}
        source = CloudFormationStackSource(client)

        items, token = source.list_root_stacks("token-2")

        client.list_stacks.assert_called_once_with(
            StackStatusFilter=list(ACTIVE_STACK_STATUSES), NextToken="token-2"
        )
        assert items == []
        assert token is None

    def test_list_stack_resources(self):
        client = MagicMock()
        client.describe_stack_resources.return_value = {
            "StackResources": [
                {
                    "PhysicalResourceId": "bucket-1",
                    "LogicalResourceId": "Bucket",
                    "ResourceType": "AWS::S3::Bucket",
                }
            ]
        }
        source = CloudFormationStackSource(client)

        items = source.list_stack_resources(stack_arn("a"))

        client.describe_stack_resources.assert_called_once_with(StackName=stack_arn("a"))
        assert items == [resource("bucket-1", "Bucket", "AWS::S3::Bucket")]


class TestListRootStacks:
    """StackTreeWalker.list_root_stacks 테스트"""

    def test_pages_in_order(self):
        source = FakeStackSource(pages=[[stack("a"), stack("b")], [stack("c")], [stack("d")]])
        walker = StackTreeWalker(source)

        roots = walker.list_root_stacks()

        assert [s.stack_name for s in roots] == ["a", "b", "c", "d"]
        assert source.page_calls == [None, "1", "2"]

    def test_filters_status_and_nested(self):
        source = FakeStackSource(
            pages=[
                [
                    stack("ok"),
                    stack("deleted", status="DELETE_COMPLETE"),
                    stack("child", parent_id=stack_arn("ok")),
                    stack("rolled-back", status="UPDATE_ROLLBACK_COMPLETE"),
                ]
            ]
        )

        roots = StackTreeWalker(source).list_root_stacks()

        assert [s.stack_name for s in roots] == ["ok", "rolled-back"]

    def test_empty(self):
        assert StackTreeWalker(FakeStackSource()).list_root_stacks() == []

    def test_max_pages_exceeded(self):
        source = FakeStackSource(pages=[[stack("a")], [stack("b")], [stack("c")]])
        walker = StackTreeWalker(source, max_pages=2)

        with pytest.raises(StackTraversalError):
            walker.list_root_stacks()

        assert len(source.page_calls) == 2

    def test_max_pages_exact(self):
        source = FakeStackSource(pages=[[stack("a")], [stack("b")]])

        roots = StackTreeWalker(source, max_pages=2).list_root_stacks()

        assert len(roots) == 2

    @pytest.mark.parametrize("kwargs", [{"max_depth": -1}, {"max_pages": 0}])
    def test_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            StackTreeWalker(FakeStackSource(), **kwargs)


class TestExpand:
    """중첩 Stack 펼치기 테스트"""

    def test_flat_stack(self):
        root = stack_arn("root")
        source = FakeStackSource(resources={root: [resource("bucket-1", "Bucket"), resource("q-1", "Queue")]})

        flat = StackTreeWalker(source).list_stack_resources(root)

        assert [(r.physical_id, r.logical_id, r.stack_id) for r in flat] == [
            ("bucket-1", "Bucket", root),
            ("q-1", "Queue", root),
        ]

    def test_nested_stack_followed_by_children(self):
        """중첩 Stack 항목 뒤에 하위 리소스가 이어짐"""
        root, child, grandchild = stack_arn("root"), stack_arn("child"), stack_arn("grandchild")
        source = FakeStackSource(
            resources={
                root: [resource("r1", "R1"), resource(child, "Child"), resource("r2", "R2")],
                child: [resource("c1", "C1"), resource(grandchild, "Grand")],
                grandchild: [resource("g1", "G1")],
            }
        )

        flat = StackTreeWalker(source).list_stack_resources(root)

        assert [r.physical_id for r in flat] == ["r1", child, "c1", grandchild, "g1", "r2"]
        assert flat[2].stack_id == child
        assert flat[4].stack_id == grandchild

    def test_type_arn_is_leaf(self):
        """Stack이 아닌 CloudFormation ARN은 펼치지 않고 리소스로 남음"""
        root = stack_arn("root")
        type_arn = "arn:aws:cloudformation:us-east-1:123456789012:type/resource/Acme-Foo-Bar"
        source = FakeStackSource(resources={root: [resource(type_arn, "FooActivation")]})

        flat = StackTreeWalker(source).list_stack_resources(root)

        assert [r.physical_id for r in flat] == [type_arn]
        assert source.resource_calls == [root]

    def test_expand_returns_tree(self):
        root, child = stack_arn("root"), stack_arn("child")
        source = FakeStackSource(resources={root: [resource(child, "Child")], child: [resource("c1", "C1")]})

        tree = StackTreeWalker(source).expand(root)

        assert isinstance(tree[0], NestedStack)
        assert isinstance(tree[0].children[0], Leaf)
        assert tree[0].children[0].resource.physical_id == "c1"

    def test_max_depth(self):
        root, child, grandchild = stack_arn("root"), stack_arn("child"), stack_arn("grandchild")
        source = FakeStackSource(
            resources={
                root: [resource(child, "Child")],
                child: [resource(grandchild, "Grand")],
                grandchild: [],
            }
        )

        with pytest.raises(StackTraversalError) as exc_info:
            StackTreeWalker(source, max_depth=1).list_stack_resources(root)
        assert exc_info.value.stack_id == grandchild

        assert StackTreeWalker(source, max_depth=2).list_stack_resources(root) == [
            DiscoveredResource(child, "Child", root),
            DiscoveredResource(grandchild, "Grand", child),
        ]

    def test_cycle_detected(self):
        a, b = stack_arn("a"), stack_arn("b")
        source = FakeStackSource(resources={a: [resource(b, "B")], b: [resource(a, "A")]})

        with pytest.raises(StackTraversalError) as exc_info:
            StackTreeWalker(source).list_stack_resources(a)
        assert exc_info.value.stack_id == a

    def test_same_child_in_sibling_branches_is_not_cycle(self):
        root, left, right, shared = (stack_arn(n) for n in ("root", "left", "right", "shared"))
        source = FakeStackSource(
            resources={
                root: [resource(left, "L"), resource(right, "R")],
                left: [resource(shared, "S")],
                right: [resource(shared, "S")],
                shared: [resource("x", "X")],
            }
        )

        flat = StackTreeWalker(source).list_stack_resources(root)

        assert [r.physical_id for r in flat].count("x") == 2

    def test_describe_client_error(self, make_client_error):
        source = MagicMock()
        source.list_stack_resources.side_effect = make_client_error("ValidationError", "Stack does not exist")

        with pytest.raises(APICallError) as exc_info:
            StackTreeWalker(source, retry_config=NO_RETRY).list_stack_resources(stack_arn("gone"))

        assert exc_info.value.operation == "describe_stack_resources"
        assert exc_info.value.error_code == "ValidationError"

    def test_describe_other_error(self):
        source = MagicMock()
        source.list_stack_resources.side_effect = RuntimeError("boom")

        with pytest.raises(StackTraversalError):
            StackTreeWalker(source, retry_config=NO_RETRY).list_stack_resources(stack_arn("x"))

    def test_describe_retried_on_throttling(self, make_client_error):
        source = MagicMock()
        source.list_stack_resources.side_effect = [make_client_error("Throttling"), [resource("b", "B")]]
        walker = StackTreeWalker(source, retry_config=RetryConfig(max_retries=1, base_delay=0.0, jitter=False))

        flat = walker.list_stack_resources(stack_arn("x"))

        assert [r.physical_id for r in flat] == ["b"]
        assert source.list_stack_resources.call_count == 2


class TestFlattenTree:
    def test_order(self):
        def leaf(pid):
            return Leaf(DiscoveredResource(pid, pid, "s"))

        tree = (
            leaf("a"),
            NestedStack(DiscoveredResource("n", "n", "s"), (leaf("n1"), NestedStack(DiscoveredResource("m", "m", "n")))),
            leaf("b"),
        )

        assert [r.physical_id for r in flatten_tree(tree)] == ["a", "n", "n1", "m", "b"]
