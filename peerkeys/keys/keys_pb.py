"""
Protobuf schema for key envelopes (libp2p ``keys.proto``):

    syntax = "proto2";

    enum KeyType {
      RSA = 0;
      Ed25519 = 1;
      Secp256k1 = 2;
      ECDSA = 3;
    }

    message PublicKey {
      required KeyType Type = 1;
      required bytes Data = 2;
    }

    message PrivateKey {
      required KeyType Type = 1;
      required bytes Data = 2;
    }

The descriptors live in a private pool so they cannot clash with another
copy of the same schema loaded by an application.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory


PACKAGE = "peerkeys.pb"
FILE_NAME = "peerkeys/keys.proto"

KEY_TYPE_VALUES = (
    ("RSA", 0),
    ("Ed25519", 1),
    ("Secp256k1", 2),
    ("ECDSA", 3),
)


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    field_proto = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto2",
    )

    key_type = file_proto.enum_type.add(name="KeyType")
    for name, number in KEY_TYPE_VALUES:
        key_type.value.add(name=name, number=number)

    for message_name in ("PublicKey", "PrivateKey"):
        message = file_proto.message_type.add(name=message_name)
        message.field.add(
            name="Type",
            number=1,
            label=field_proto.LABEL_REQUIRED,
            type=field_proto.TYPE_ENUM,
            type_name=f".{PACKAGE}.KeyType",
        )
        message.field.add(
            name="Data",
            number=2,
            label=field_proto.LABEL_REQUIRED,
            type=field_proto.TYPE_BYTES,
        )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())

PublicKey = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.PublicKey"))
PrivateKey = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.PrivateKey"))

__all__ = ["PublicKey", "PrivateKey", "KEY_TYPE_VALUES"]
