from __future__ import annotations

from topologist.adapters.descriptor.schema import TopicModel, TopologyDocument


def test_sizing_is_lifted_out_of_config() -> None:
    topic = TopicModel.model_validate(
        {
            "name": "t",
            "config": {"num.partitions": "6", "replication.factor": 3, "compression.type": "lz4"},
        }
    )

    assert topic.partitions == 6
    assert topic.replication_factor == 3
    assert topic.config == {"compression.type": "lz4"}


def test_config_values_are_stringified() -> None:
    topic = TopicModel.model_validate(
        {"name": "t", "config": {"retention.ms": 1000, "preallocate": True}}
    )

    assert topic.config == {"retention.ms": "1000", "preallocate": "true"}


def test_defaults_without_config() -> None:
    topic = TopicModel.model_validate({"name": "t", "dataType": "json"})

    assert (topic.partitions, topic.replication_factor) == (3, 2)
    assert topic.data_type == "json"


def test_extra_top_level_keys_become_prefix_parts() -> None:
    document = TopologyDocument.model_validate(
        {"context": "ctx", "company": "acme", "env": 1, "projects": []}
    )

    assert document.prefix_parts == ("acme", "1")
